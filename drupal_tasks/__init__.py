"""Drupal site automation tasks.

Thin orchestration around the drush and composer binaries:
- Install a Drupal site and write its database settings
- Create user accounts and generate one-time login links
- Resolve Drupal.org issue patches and add them to the composer patch config
"""

__version__ = "1.0.0"
