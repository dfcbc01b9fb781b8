"""netcup DNS provider built from environment variables or an explicit Config."""
import hashlib
import logging
import os
import re
from typing import Any
from typing import List
from typing import Mapping
from typing import Optional
from typing import Tuple

import josepy as jose
import nc_dnsapi
import requests

from acme import challenges
from certbot import errors
from certbot.plugins import dns_common

logger = logging.getLogger(__name__)

ENV_CUSTOMER_NUMBER = 'NETCUP_CUSTOMER_NUMBER'
ENV_API_KEY = 'NETCUP_API_KEY'
ENV_API_PASSWORD = 'NETCUP_API_PASSWORD'
ENV_PROPAGATION_TIMEOUT = 'NETCUP_PROPAGATION_TIMEOUT'
ENV_POLLING_INTERVAL = 'NETCUP_POLLING_INTERVAL'
ENV_HTTP_TIMEOUT = 'NETCUP_HTTP_TIMEOUT'

# Only read by the live tests.
ENV_DOMAIN = 'NETCUP_DOMAIN'

REQUIRED_ENV = (ENV_CUSTOMER_NUMBER, ENV_API_KEY, ENV_API_PASSWORD)

DEFAULT_PROPAGATION_TIMEOUT = 120
DEFAULT_POLLING_INTERVAL = 5
DEFAULT_HTTP_TIMEOUT = 10

_STATUS_CODE = re.compile(r'\((\d+)\)$')
_SESSION_ERROR_WORDS = ('session', 'api key', 'apikey', 'password', 'login')


class NetcupError(errors.PluginError):
    """netcup provider error."""


class MissingEnvCredentials(NetcupError):
    """One or more credential environment variables are empty.

    :ivar tuple missing: Names of the missing variables, in declaration order.

    """
    def __init__(self, missing: Tuple[str, ...]) -> None:
        self.missing = missing
        super().__init__('netcup: some credentials information are missing: {0}'
                         .format(','.join(missing)))


class MissingConfigCredentials(NetcupError):
    """A Config was given without customer number, API key or API password."""

    def __init__(self) -> None:
        super().__init__('netcup: netcup credentials missing')


class Config:
    """Settings for a `DNSProvider`.

    :ivar str customer: netcup customer number.
    :ivar str key: CCP API key.
    :ivar str password: CCP API password.
    :ivar int propagation_timeout: Seconds to wait for a record to propagate.
    :ivar int polling_interval: Seconds between two propagation checks.
    :ivar int http_timeout: Timeout in seconds for each CCP API request.

    """
    def __init__(self, customer: str = '', key: str = '', password: str = '',
                 propagation_timeout: int = DEFAULT_PROPAGATION_TIMEOUT,
                 polling_interval: int = DEFAULT_POLLING_INTERVAL,
                 http_timeout: int = DEFAULT_HTTP_TIMEOUT) -> None:
        self.customer = customer
        self.key = key
        self.password = password
        self.propagation_timeout = propagation_timeout
        self.polling_interval = polling_interval
        self.http_timeout = http_timeout

    def has_credentials(self) -> bool:
        """Are customer number, API key and API password all set?"""
        return bool(self.customer and self.key and self.password)

    def __repr__(self) -> str:
        # The key and password stay out of reprs, and therefore out of logs.
        return ('{0}(customer={1!r}, propagation_timeout={2}, polling_interval={3}, '
                'http_timeout={4})'.format(self.__class__.__name__, self.customer,
                                          self.propagation_timeout, self.polling_interval,
                                          self.http_timeout))


def _environ(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def _get_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise NetcupError('netcup: invalid value for {0}: {1!r}'.format(name, value))


def new_default_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Create a Config without credentials, tuned from the environment.

    :param environ: Environment snapshot; defaults to `os.environ`.
    :rtype: Config
    """
    environ = _environ(environ)
    return Config(
        propagation_timeout=_get_int(environ, ENV_PROPAGATION_TIMEOUT,
                                     DEFAULT_PROPAGATION_TIMEOUT),
        polling_interval=_get_int(environ, ENV_POLLING_INTERVAL, DEFAULT_POLLING_INTERVAL),
        http_timeout=_get_int(environ, ENV_HTTP_TIMEOUT, DEFAULT_HTTP_TIMEOUT),
    )


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Read a complete Config from the environment.

    Every required variable is checked before failing, so the error lists all
    of the missing ones and not just the first.

    :param environ: Environment snapshot; defaults to `os.environ`.
    :returns: The populated configuration.
    :rtype: Config
    :raises MissingEnvCredentials: if any required variable is unset or empty.
    """
    environ = _environ(environ)

    missing = tuple(name for name in REQUIRED_ENV if not environ.get(name))
    if missing:
        raise MissingEnvCredentials(missing)

    config = new_default_config(environ)
    config.customer = environ[ENV_CUSTOMER_NUMBER]
    config.key = environ[ENV_API_KEY]
    config.password = environ[ENV_API_PASSWORD]
    return config


def new_dns_provider(environ: Optional[Mapping[str, str]] = None) -> 'DNSProvider':
    """Create a DNSProvider from ``NETCUP_*`` environment variables.

    :param environ: Environment snapshot; defaults to `os.environ`.
    :raises MissingEnvCredentials: if any credential variable is missing.
    """
    return new_dns_provider_config(load_config(environ))


def new_dns_provider_config(config: Optional[Config]) -> 'DNSProvider':
    """Create a DNSProvider from an explicit Config.

    No request is sent to netcup here; each record change opens its own API session.

    :param Config config: The provider configuration.
    :raises MissingConfigCredentials: if `config` is None or lacks a credential.
    """
    if config is None or not config.has_credentials():
        raise MissingConfigCredentials()

    client = _NetcupClient(config.customer, config.key, config.password, config.http_timeout)
    return DNSProvider(config, client)


def challenge_record(domain: str, key_auth: str) -> Tuple[str, str]:
    """Compute the dns-01 TXT record name and content.

    :param str domain: Domain being validated, possibly a ``*.`` wildcard.
    :param str key_auth: The key authorization for the challenge.
    :returns: ``(record_name, record_content)``
    :rtype: tuple
    """
    record_name = '{0}.{1}'.format(challenges.DNS01.LABEL, _unwildcard(domain))
    record_content = jose.b64encode(hashlib.sha256(key_auth.encode('utf-8')).digest()).decode()
    return record_name, record_content


class DNSProvider:
    """Creates and removes dns-01 TXT records through the netcup CCP API.

    Use `new_dns_provider` or `new_dns_provider_config` to build one.
    """

    def __init__(self, config: Config, client: '_NetcupClient') -> None:
        self.config = config
        self.client = client

    def timeout(self) -> Tuple[int, int]:
        """Return ``(propagation_timeout, polling_interval)`` in seconds."""
        return self.config.propagation_timeout, self.config.polling_interval

    def present(self, domain: str, token: str, key_auth: str) -> None:  # pylint: disable=unused-argument
        """Create the TXT record answering a dns-01 challenge for `domain`.

        :raises NetcupError: if the zone cannot be found or the record cannot be added.
        """
        record_name, record_content = challenge_record(domain, key_auth)
        self.add_txt_record(_unwildcard(domain), record_name, record_content)

    def cleanup(self, domain: str, token: str, key_auth: str) -> None:  # pylint: disable=unused-argument
        """Remove the TXT record created by `present`.

        Nothing is retried. If this fails the record has to be removed by hand.

        :raises NetcupError: if the zone cannot be found or the record cannot be deleted.
        """
        record_name, record_content = challenge_record(domain, key_auth)
        self.del_txt_record(_unwildcard(domain), record_name, record_content)

    def add_txt_record(self, domain: str, record_name: str, record_content: str) -> None:
        """
        Add a TXT record using the supplied information.

        :param str domain: The domain to use to look up the netcup zone.
        :param str record_name: The record name (typically beginning with '_acme-challenge.').
        :param str record_content: The record content (typically the challenge validation).
        :raises NetcupError: if an error occurs communicating with the netcup API
        """
        with self.client.session('adding TXT record') as api:
            zone = self._find_zone(api, domain)
            record = nc_dnsapi.DNSRecord(hostname=_relative_name(record_name, zone),
                                         type='TXT', destination=record_content)
            try:
                logger.debug('Attempting to add record to zone %s: %s', zone, record.hostname)
                api.add_dns_record(zone, record)
            except Exception as e:
                logger.error('Encountered error adding TXT record: %s', e)
                raise NetcupError('netcup: failed to add TXT record {0}: {1}'
                                  .format(record_name, e)) from e
        logger.debug('Successfully added TXT record %s', record_name)

    def del_txt_record(self, domain: str, record_name: str, record_content: str) -> None:
        """
        Delete a TXT record using the supplied information.

        Both the record's name and content are used to ensure that similar records
        created concurrently are not deleted. A record that cannot be found is ignored.

        :param str domain: The domain to use to look up the netcup zone.
        :param str record_name: The record name (typically beginning with '_acme-challenge.').
        :param str record_content: The record content (typically the challenge validation).
        :raises NetcupError: if an error occurs communicating with the netcup API
        """
        with self.client.session('deleting TXT record') as api:
            zone = self._find_zone(api, domain)
            record = self._find_txt_record(api, zone, _relative_name(record_name, zone),
                                           record_content)
            if record is None:
                logger.debug('TXT record not found; no cleanup needed.')
                return
            try:
                # The SDK drops delete errors unless told otherwise.
                api.delete_dns_record(zone, record, ignore_unknown=False)
            except Exception as e:
                raise NetcupError('netcup: failed to delete TXT record {0}: {1}'
                                  .format(record_name, e)) from e
        logger.debug('Successfully deleted TXT record %s', record_name)

    @staticmethod
    def _find_zone(api: nc_dnsapi.Client, domain: str) -> str:
        """
        Find the netcup zone for a given domain.

        Only an API answer that a guess is not a zone moves on to the next guess;
        any other error is raised.

        :param str domain: The domain for which to find the zone.
        :returns: The zone name, if found.
        :rtype: str
        :raises NetcupError: if no zone is found or the API cannot be queried.
        """
        zone_name_guesses = dns_common.base_domain_name_guesses(domain)

        for zone_name in zone_name_guesses:
            try:
                api.dns_zone(zone_name)
            except Exception as e:
                if not _is_unknown_zone(e):
                    raise NetcupError('netcup: error determining zone for {0}: {1}'
                                      .format(domain, e)) from e
                logger.debug('No netcup zone %s: %s. Continuing with next zone guess...',
                             zone_name, e)
                continue
            logger.debug('Found zone %s for %s', zone_name, domain)
            return zone_name

        raise NetcupError('netcup: unable to find a zone for {0} using zone names: {1}'
                          .format(domain, zone_name_guesses))

    @staticmethod
    def _find_txt_record(api: nc_dnsapi.Client, zone: str, hostname: str,
                         record_content: str) -> Optional[nc_dnsapi.DNSRecord]:
        try:
            records: List[nc_dnsapi.DNSRecord] = api.dns_records(zone)
        except Exception as e:
            raise NetcupError('netcup: failed to list records of zone {0}: {1}'
                              .format(zone, e)) from e

        for record in records:
            if (record.hostname == hostname and record.type == 'TXT'
                    and record.destination == record_content):
                # Only one is removed because only one was added.
                return record
        return None


class _NetcupClient:
    """Holds the CCP API credentials and opens sessions with them.

    The SDK client logs in when it is created and cannot log in again after
    logging out, so every session gets a client of its own.
    """

    def __init__(self, customer: str, key: str, password: str, timeout: int) -> None:
        self.customer = customer
        self.key = key
        self.password = password
        self.timeout = timeout

    def login(self) -> nc_dnsapi.Client:
        """Create an SDK client, which logs in to the CCP API."""
        return nc_dnsapi.Client(self.customer, self.key, self.password, timeout=self.timeout)

    def session(self, action: str) -> '_Session':
        """Open a CCP API session for `action`, used in log and error messages."""
        return _Session(self, action)


class _Session:
    """Logs in to the CCP API on enter and out again on exit.

    Login and logout failures are reported as `NetcupError`.
    """

    def __init__(self, client: _NetcupClient, action: str) -> None:
        self.client = client
        self.action = action
        self.api: Optional[nc_dnsapi.Client] = None

    def __enter__(self) -> nc_dnsapi.Client:
        try:
            self.api = self.client.login()
        except Exception as e:
            raise NetcupError('netcup: failed to login while {0}: {1}'
                              .format(self.action, e)) from e
        return self.api

    def __exit__(self, *exc_info: Any) -> None:
        try:
            self.api.logout()
        except Exception as e:
            if exc_info[0] is None:
                raise NetcupError('netcup: failed to logout after {0}: {1}'
                                  .format(self.action, e)) from e
            logger.debug('Encountered error logging out of the netcup API: %s', e)
        finally:
            self.api = None


def _is_unknown_zone(error: Exception) -> bool:
    """Did the CCP API answer that a domain name is not one of the account's zones?

    The SDK raises API errors as ``Exception('<message> (<status code>)')``. CCP
    status codes have four digits; shorter codes are HTTP errors. Network
    failures and session or credential errors are never an unknown zone.
    """
    if isinstance(error, requests.RequestException):
        return False
    message = str(error)
    match = _STATUS_CODE.search(message)
    if not match or int(match.group(1)) < 1000:
        return False
    message = message.lower()
    return not any(word in message for word in _SESSION_ERROR_WORDS)


def _unwildcard(domain: str) -> str:
    domain = domain.rstrip('.')
    if domain.startswith('*.'):
        return domain[2:]
    return domain


def _relative_name(record_name: str, zone: str) -> str:
    """Return `record_name` relative to `zone`, as netcup expects hostnames."""
    record_name = record_name.rstrip('.')
    if record_name == zone:
        return '@'
    suffix = '.' + zone
    if record_name.endswith(suffix):
        return record_name[:-len(suffix)]
    return record_name
