# dust/modules/config.py
import configparser
import os

DEFAULT_LOCATIONS = [
    "/etc/dust/dust.conf",
    os.path.expanduser("~/.config/dust/dust.conf"),
]

DEFAULTS = {
    "paths": {
        "repo_dir": "~/.dust",
    },
    "remote": {
        "base_url": "https://aur.archlinux.org",
        "rpc_version": "5",
        "git_url": "https://aur.archlinux.org/%s.git",
    },
    "system": {
        "pacman": "pacman",
        "sudo": "sudo",
        "makepkg": "makepkg",
        "makepkg_flags": "-sirc",
        "editor": "nano",
    },
    "logging": {
        "level": "info",
        "log_file": "~/.cache/dust/dust.log",
        "history_file": "~/.cache/dust/history.log",
        "log_to_file": "true",
        "log_to_console": "false",
        "log_format": "text",
        "color_output": "true",
        "timestamp_utc": "false",
        "max_log_size_kb": "512",
    },
    "hooks": {
        "pre_clone": "",
        "post_clone": "",
        "pre_build": "",
        "post_build": "",
    },
}


class DustConfig:
    def __init__(self, locations=None):
        self.locations = locations or self._default_locations()
        self.config = configparser.ConfigParser(interpolation=None)
        self.loaded_from = None
        self.reload()

    @staticmethod
    def _default_locations():
        env = os.environ.get("DUST_CONFIG")
        return ([env] if env else []) + DEFAULT_LOCATIONS

    def reload(self, locations=None):
        """(Re)load built-in defaults, then the first configuration file found."""
        if locations:
            self.locations = locations
        self.config = configparser.ConfigParser(interpolation=None)
        self.config.read_dict(DEFAULTS)
        self.loaded_from = None
        for path in self.locations:
            if os.path.isfile(path):
                self.config.read(path)
                self.loaded_from = path
                return

    def get(self, section, option, fallback=None):
        try:
            return self.config.get(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def getboolean(self, section, option, fallback=False):
        try:
            return self.config.getboolean(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getint(self, section, option, fallback=0):
        try:
            return self.config.getint(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getlist(self, section, option, fallback=None, delimiter=","):
        raw = self.get(section, option, fallback="")
        if raw:
            return [item.strip() for item in raw.split(delimiter) if item.strip()]
        return fallback or []

    def getpath(self, section, option, fallback=None):
        raw = self.get(section, option, fallback=fallback)
        if raw is None:
            return None
        return os.path.abspath(os.path.expandvars(os.path.expanduser(raw)))

    def set(self, section, option, value):
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, option, str(value))

    def __getitem__(self, section):
        if section in self.config:
            return dict(self.config[section])
        raise KeyError(f"Section '{section}' not found.")

    def __contains__(self, section):
        return section in self.config

# Shared default instance
config = DustConfig()
