"""Tests for certbot_dns_netcup._internal.dns_netcup."""

import sys
import unittest
from unittest import mock

import pytest

from certbot import errors
from certbot.compat import os
from certbot.plugins import dns_test_common
from certbot.plugins.dns_test_common import DOMAIN
from certbot.tests import util as test_util

CUSTOMER_ID = 123456
API_KEY = 'an-api-key'
API_PASSWORD = 'an-api-password'


class AuthenticatorTest(test_util.TempDirTestCase, dns_test_common.BaseAuthenticatorTest):

    def setUp(self):
        from certbot_dns_netcup._internal.dns_netcup import Authenticator

        super().setUp()

        path = os.path.join(self.tempdir, 'file.ini')
        dns_test_common.write({
            "netcup_customer_id": CUSTOMER_ID,
            "netcup_api_key": API_KEY,
            "netcup_api_password": API_PASSWORD,
        }, path)

        self.config = mock.MagicMock(netcup_credentials=path,
                                     netcup_propagation_seconds=0)  # don't wait during tests

        self.auth = Authenticator(self.config, "netcup")

        self.mock_provider = mock.MagicMock()
        # _get_netcup_provider | pylint: disable=protected-access
        self.auth._get_netcup_provider = mock.MagicMock(return_value=self.mock_provider)

    @test_util.patch_display_util()
    def test_perform(self, unused_mock_get_utility):
        self.auth.perform([self.achall])

        expected = [mock.call.add_txt_record(DOMAIN, '_acme-challenge.'+DOMAIN, mock.ANY)]
        assert expected == self.mock_provider.mock_calls

    def test_cleanup(self):
        # _attempt_cleanup | pylint: disable=protected-access
        self.auth._attempt_cleanup = True
        self.auth.cleanup([self.achall])

        expected = [mock.call.del_txt_record(DOMAIN, '_acme-challenge.'+DOMAIN, mock.ANY)]
        assert expected == self.mock_provider.mock_calls

    @mock.patch('certbot_dns_netcup._internal.dns_netcup.logger')
    def test_cleanup_error_is_not_raised(self, mock_logger):
        error = errors.PluginError('netcup: failed')
        self.mock_provider.del_txt_record.side_effect = error
        # _attempt_cleanup | pylint: disable=protected-access
        self.auth._attempt_cleanup = True

        self.auth.cleanup([self.achall])

        mock_logger.warning.assert_called_once_with(mock.ANY, '_acme-challenge.'+DOMAIN, error)

    @test_util.patch_display_util()
    def test_perform_error(self, unused_mock_get_utility):
        self.mock_provider.add_txt_record.side_effect = errors.PluginError('netcup: failed')

        with pytest.raises(errors.PluginError):
            self.auth.perform([self.achall])

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_no_creds(self):
        dns_test_common.write({}, self.config.netcup_credentials)

        with pytest.raises(errors.PluginError) as exc_info:
            self.auth.perform([self.achall])

        assert 'netcup_customer_id' in str(exc_info.value)
        assert 'NETCUP_API_PASSWORD' in str(exc_info.value)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_missing_password(self):
        dns_test_common.write({"netcup_customer_id": CUSTOMER_ID, "netcup_api_key": API_KEY},
                              self.config.netcup_credentials)

        with pytest.raises(errors.PluginError) as exc_info:
            self.auth.perform([self.achall])

        assert 'Missing property' in str(exc_info.value)
        assert 'netcup_api_password' in str(exc_info.value)

    @test_util.patch_display_util()
    @mock.patch.dict(os.environ, {'NETCUP_API_PASSWORD': API_PASSWORD}, clear=True)
    def test_password_from_environment(self, unused_mock_get_utility):
        dns_test_common.write({"netcup_customer_id": CUSTOMER_ID, "netcup_api_key": API_KEY},
                              self.config.netcup_credentials)

        self.auth.perform([self.achall])

        assert len(self.mock_provider.add_txt_record.mock_calls) == 1

    def test_parser_default_propagation_seconds(self):
        m = mock.MagicMock()
        self.auth.add_parser_arguments(m)

        m.assert_any_call('propagation-seconds', type=int, default=900, help=mock.ANY)
        m.assert_any_call('credentials', help=mock.ANY)


class GetNetcupProviderTest(test_util.TempDirTestCase):

    def setUp(self):
        from certbot_dns_netcup._internal.dns_netcup import Authenticator

        super().setUp()

        self.path = os.path.join(self.tempdir, 'file.ini')
        self.config = mock.MagicMock(netcup_credentials=self.path,
                                     netcup_propagation_seconds=0)
        self.auth = Authenticator(self.config, "netcup")

    @mock.patch('nc_dnsapi.requests.post')
    @mock.patch.dict(os.environ, {'NETCUP_API_KEY': 'from-env'}, clear=True)
    def test_provider_from_credentials(self, mock_post):
        dns_test_common.write({"netcup_customer_id": CUSTOMER_ID,
                               "netcup_api_password": API_PASSWORD}, self.path)
        # pylint: disable=protected-access
        self.auth._setup_credentials()

        p = self.auth._get_netcup_provider()

        assert p.config.customer == str(CUSTOMER_ID)
        assert p.config.key == 'from-env'
        assert p.config.password == API_PASSWORD
        assert p.client is not None
        mock_post.assert_not_called()


if __name__ == "__main__":
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
