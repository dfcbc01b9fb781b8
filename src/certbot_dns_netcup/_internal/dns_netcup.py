"""DNS Authenticator for netcup."""
import logging
import os
from typing import Any
from typing import Callable
from typing import Optional

from certbot import errors
from certbot.plugins import dns_common
from certbot.plugins.dns_common import CredentialsConfiguration

from certbot_dns_netcup._internal import provider

logger = logging.getLogger(__name__)

CCP_API_URL = 'https://www.netcup-wiki.de/wiki/CCP_API'

# INI property -> (environment fallback, description)
_CREDENTIALS = {
    'customer-id': (provider.ENV_CUSTOMER_NUMBER,
                    'customer ID associated with netcup account'),
    'api-key': (provider.ENV_API_KEY, 'API key for CCP API, see {0}'.format(CCP_API_URL)),
    'api-password': (provider.ENV_API_PASSWORD,
                     'API password for CCP API, see {0}'.format(CCP_API_URL)),
}


class Authenticator(dns_common.DNSAuthenticator):
    """DNS Authenticator for netcup

    This Authenticator uses the netcup API to fulfill a dns-01 challenge.
    """

    description = ('Obtain certificates using a DNS TXT record (if you are using netcup for '
                   'DNS).')

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.credentials: Optional[CredentialsConfiguration] = None

    @classmethod
    def add_parser_arguments(cls, add: Callable[..., None],
                             default_propagation_seconds: int = 900) -> None:
        super().add_parser_arguments(add, default_propagation_seconds)
        add('credentials', help='netcup credentials INI file.')

    def more_info(self) -> str:
        return 'This plugin configures a DNS TXT record to respond to a dns-01 challenge using ' + \
               'the netcup API.'

    def _credential(self, credentials: CredentialsConfiguration, var: str) -> Optional[str]:
        env_name = _CREDENTIALS[var][0]
        return credentials.conf(var) or os.getenv(env_name)

    def _validate_credentials(self, credentials: CredentialsConfiguration) -> None:
        messages = []
        for var, (env_name, description) in _CREDENTIALS.items():
            if not self._credential(credentials, var):
                messages.append('Property "{0}" not set and {1} is empty (should be {2}).'
                                .format(self.dest(var), env_name, description))
        if messages:
            raise errors.PluginError(
                'Missing {0} in credentials configuration file {1}:\n * {2}'.format(
                    'property' if len(messages) == 1 else 'properties',
                    credentials.confobj.filename,
                    '\n * '.join(messages)))

    def _setup_credentials(self) -> None:
        self.credentials = self._configure_credentials(
            'credentials',
            'netcup credentials INI file',
            None,
            self._validate_credentials
        )

    def _perform(self, domain: str, validation_name: str, validation: str) -> None:
        self._get_netcup_provider().add_txt_record(domain, validation_name, validation)

    def _cleanup(self, domain: str, validation_name: str, validation: str) -> None:
        try:
            self._get_netcup_provider().del_txt_record(domain, validation_name, validation)
        except errors.PluginError as e:
            logger.warning('Unable to remove TXT record %s, please remove it yourself: %s',
                           validation_name, e)

    def _get_netcup_provider(self) -> provider.DNSProvider:
        if not self.credentials:  # pragma: no cover
            raise errors.Error("Plugin has not been prepared.")
        config = provider.new_default_config()
        config.customer = self._credential(self.credentials, 'customer-id') or ''
        config.key = self._credential(self.credentials, 'api-key') or ''
        config.password = self._credential(self.credentials, 'api-password') or ''
        return provider.new_dns_provider_config(config)
