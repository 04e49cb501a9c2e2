"""Configuration schemas and defaults for moodledeploy."""

DEFAULT_CONFIG = {
    "moodle": {
        "dir": "/var/www/html/moodle",
        "data_dir": "/var/www/moodledata",
        "repository": "https://github.com/moodle/moodle.git",
        "branch": "MOODLE_500_STABLE",
        "lang": "en",
        "fullname": "Moodle Dev Server",
        "shortname": "dev-server",
        "admin_user": "admin",
        "admin_email": "amit@justuju.in",
    },
    "php": {
        "version": "8.3",
        "settings": {
            "max_input_vars": "5000",
            "post_max_size": "256M",
            "upload_max_filesize": "256M",
        },
    },
    "web": {
        "user": "www-data",
    },
    "database": {
        "type": "mariadb",
        "host": "localhost",
        "name": "moodle",
        "user": "moodleuser",
    },
    "ssl": {
        "email": "devs@justuju.in",
        "staging": False,
    },
    "backup": {
        "user": "backupuser",
        "dir": "/var/backups/moodle",
        "retention_days": 30,
        "client_config": "/root/.my.cnf",
    },
    "firewall": {
        "allow": ["22/tcp", "Nginx HTTP", "Nginx Full"],
    },
    "credentials": {
        "filename": "moodlePasswords.txt",
    },
}

_STRING = {"type": "string", "minLength": 1}

DEPLOY_CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "moodle": {
            "type": "object",
            "properties": {
                "dir": {"type": "string", "pattern": r"^/"},
                "data_dir": {"type": "string", "pattern": r"^/"},
                "repository": _STRING,
                "branch": _STRING,
                "lang": {"type": "string", "pattern": r"^[a-z]{2}(_[a-z]+)?$"},
                "fullname": _STRING,
                "shortname": _STRING,
                "admin_user": _STRING,
                "admin_email": _STRING,
            },
            "additionalProperties": False,
        },
        "php": {
            "type": "object",
            "properties": {
                "version": {"type": "string", "pattern": r"^\d+\.\d+$"},
                "settings": {
                    "type": "object",
                    "patternProperties": {
                        r"^[a-z0-9_.]+$": {"type": ["string", "integer"]},
                    },
                    "additionalProperties": False,
                },
            },
            "additionalProperties": False,
        },
        "web": {
            "type": "object",
            "properties": {
                "user": _STRING,
            },
            "additionalProperties": False,
        },
        "database": {
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": ["mariadb", "mysqli"]},
                "host": _STRING,
                "name": {"type": "string", "pattern": r"^[A-Za-z0-9_]+$"},
                "user": {"type": "string", "pattern": r"^[A-Za-z0-9_]+$"},
            },
            "additionalProperties": False,
        },
        "ssl": {
            "type": "object",
            "properties": {
                "email": _STRING,
                "staging": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "backup": {
            "type": "object",
            "properties": {
                "user": {"type": "string", "pattern": r"^[A-Za-z0-9_]+$"},
                "dir": {"type": "string", "pattern": r"^/"},
                "retention_days": {"type": "integer", "minimum": 1},
                "client_config": {"type": "string", "pattern": r"^/"},
            },
            "additionalProperties": False,
        },
        "firewall": {
            "type": "object",
            "properties": {
                "allow": {
                    "type": "array",
                    "items": _STRING,
                    "minItems": 1,
                },
            },
            "additionalProperties": False,
        },
        "credentials": {
            "type": "object",
            "properties": {
                "filename": _STRING,
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}
