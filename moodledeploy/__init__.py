"""moodledeploy - provision a Moodle site on nginx, MariaDB and PHP-FPM."""

__version__ = "0.1.0"
__author__ = "moodledeploy maintainers"
