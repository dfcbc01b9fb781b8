"""
The `~certbot_dns_netcup.dns_netcup` plugin automates the process of
completing a ``dns-01`` challenge (`~acme.challenges.DNS01`) by creating, and
subsequently removing, TXT records using the netcup CCP API.

Named Arguments
---------------

======================================  =======================================
``--dns-netcup-credentials``            netcup credentials_ INI file.
                                        (Required)
``--dns-netcup-propagation-seconds``    The number of seconds to wait for DNS
                                        to propagate before asking the ACME
                                        server to verify the DNS record.
                                        (Default: 900)
======================================  =======================================


Credentials
-----------

Use of this plugin requires a configuration file containing netcup CCP API
credentials: your customer number, an API key and an API password. The key
and password are created in the netcup Customer Control Panel, see the
`CCP API documentation <https://www.netcup-wiki.de/wiki/CCP_API>`_.

.. code-block:: ini
   :name: credentials.ini
   :caption: Example credentials file:

   # netcup API credentials used by Certbot
   dns_netcup_customer_id = 123456
   dns_netcup_api_key = 0123456789abcdef0123456789abcdef01234567
   dns_netcup_api_password = abcdef0123456789abcdef01234567abcdef0123

A property left out of the file is read from the matching environment
variable instead: ``NETCUP_CUSTOMER_NUMBER``, ``NETCUP_API_KEY`` and
``NETCUP_API_PASSWORD``.

The path to this file can be provided interactively or using the
``--dns-netcup-credentials`` command-line argument. Certbot records the path
to this file for use during renewal, but does not store the file's contents.

.. caution::
   You should protect these API credentials as you would the password to your
   netcup account. Users who can read this file can use these credentials to
   issue arbitrary API calls on your behalf. Users who can cause Certbot to run
   using these credentials can complete a ``dns-01`` challenge to acquire new
   certificates or revoke existing certificates for associated domains, even
   if those domains aren't being managed by this server.

Certbot will emit a warning if it detects that the credentials file can be
accessed by other users on your system. The warning reads "Unsafe permissions
on credentials configuration file", followed by the path to the credentials
file.

.. note::
   netcup's nameservers are slow to pick up zone changes, which is why the
   default propagation time is 15 minutes.


Using the provider directly
---------------------------

`new_dns_provider` builds a `DNSProvider` from the ``NETCUP_*`` environment
variables (or any mapping passed in their place), `new_dns_provider_config`
from a `Config`. Both fail before any request is sent if credentials are
missing.

.. code-block:: python

   from certbot_dns_netcup import new_dns_provider

   provider = new_dns_provider()
   provider.present('example.com', token, key_authorization)
   ...
   provider.cleanup('example.com', token, key_authorization)

The optional ``NETCUP_PROPAGATION_TIMEOUT``, ``NETCUP_POLLING_INTERVAL`` and
``NETCUP_HTTP_TIMEOUT`` variables (in seconds) tune the returned provider.


Examples
--------

.. code-block:: bash
   :caption: To acquire a certificate for ``example.com``

   certbot certonly \\
     --authenticator dns-netcup \\
     --dns-netcup-credentials ~/.secrets/certbot/netcup.ini \\
     -d example.com

.. code-block:: bash
   :caption: To acquire a single certificate for both ``example.com`` and
             ``*.example.com``

   certbot certonly \\
     --authenticator dns-netcup \\
     --dns-netcup-credentials ~/.secrets/certbot/netcup.ini \\
     -d example.com \\
     -d '*.example.com'

.. code-block:: bash
   :caption: To acquire a certificate for ``example.com``, waiting 20 minutes
             for DNS propagation

   certbot certonly \\
     --authenticator dns-netcup \\
     --dns-netcup-credentials ~/.secrets/certbot/netcup.ini \\
     --dns-netcup-propagation-seconds 1200 \\
     -d example.com

"""
from certbot_dns_netcup._internal.provider import Config
from certbot_dns_netcup._internal.provider import DNSProvider
from certbot_dns_netcup._internal.provider import MissingConfigCredentials
from certbot_dns_netcup._internal.provider import MissingEnvCredentials
from certbot_dns_netcup._internal.provider import NetcupError
from certbot_dns_netcup._internal.provider import load_config
from certbot_dns_netcup._internal.provider import new_default_config
from certbot_dns_netcup._internal.provider import new_dns_provider
from certbot_dns_netcup._internal.provider import new_dns_provider_config

__all__ = [
    'Config',
    'DNSProvider',
    'MissingConfigCredentials',
    'MissingEnvCredentials',
    'NetcupError',
    'load_config',
    'new_default_config',
    'new_dns_provider',
    'new_dns_provider_config',
]
