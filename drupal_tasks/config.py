"""Configuration constants for Drupal tasks."""

import re

# Drupal.org legacy REST API
DRUPAL_API_BASE_URL = "https://www.drupal.org/api-d7"
DRUPAL_API_TIMEOUT = 30
USER_AGENT = "drupal-tasks"

# Patch resolution
PATCH_LOOKUP_LIMIT = 10  # Most recent displayed attachments to inspect
PATCH_EXTENSION = "patch"
ISSUE_URL_PATTERN = re.compile(
    r"^https?://(?:www.)?drupal.org/project/.+/issues/(\d+)$"
)

# Composer
DRUPAL_VENDOR_PREFIX = "drupal/"
DRUPAL_CORE_PACKAGE = "drupal/core"
DRUPAL_CORE_RECOMMENDED_PACKAGE = "drupal/core-recommended"
COMPOSER_MANIFEST = "composer.json"

# Site installation
DRUPAL_PROFILES = ("standard", "minimal")
DEFAULT_SITE_DIRECTORY = "web/sites/default"
SETTINGS_LOCAL_FILE = "settings.local.php"
SETTINGS_DATABASES_PATTERN = re.compile(r"\$databases")

# Account defaults
DEFAULT_ACCOUNT_ROLE = "administrator"
DEFAULT_ACCOUNT_EMAIL = "admin@example.com"
DEFAULT_ACCOUNT_PASSWORD = "admin"

# drush user:login lookup option per lookup type
USER_LOOKUP_TYPES = {
    "id": "uid",
    "name": "name",
    "mail": "mail",
}

# Database defaults
DEFAULT_DB_DRIVER = "mysql"
DEFAULT_DB_HOST = "127.0.0.1"
DEFAULT_DB_PORT = 3306

DATABASE_SETTINGS_TEMPLATE = """\
$databases['default']['default'] = [
  'database' => '{database}',
  'username' => '{username}',
  'password' => '{password}',
  'host' => '{host}',
  'port' => '{port}',
  'driver' => '{driver}',
  'namespace' => 'Drupal\\{driver}\\Driver\\Database\\{driver}',
];"""
