"""Config Cipher Meta information.
   Config Cipher protects sensitive configuration values (API keys, tokens)
   at rest using symmetric encryption.
"""
__title__ = 'config_cipher'
__description__ = (
   'Config Cipher protects sensitive configuration values '
   'at rest using AES-256-CBC.'
)
__version__ = '1.0.0'
__copyright__ = 'Copyright (c) 2026 Config Cipher Developers'
__author__ = 'Config Cipher Developers'
__license__ = 'Apache-2.0'
