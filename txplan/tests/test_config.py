"""Tests for configuration"""

import re

import pytest

from txplan.core import config


class TestPlatformNames:
    """Tests for platform name detection with built-in defaults."""

    def test_runtime_names(self):
        assert config.is_platform_name('php')
        assert config.is_platform_name('php-64bit')
        assert config.is_platform_name('PHP')
        assert config.is_platform_name('hhvm')

    def test_extensions_and_libraries(self):
        assert config.is_platform_name('ext-json')
        assert config.is_platform_name('lib-icu')
        assert not config.is_platform_name('libfoo')

    def test_api_names(self):
        assert config.is_platform_name('composer-plugin-api')
        assert config.is_platform_name('composer-runtime-api')

    def test_rpm_capabilities(self):
        assert config.is_platform_name('rpmlib(PayloadIsXz)')
        assert config.is_platform_name('/bin/sh')

    def test_packages(self):
        assert not config.is_platform_name('monolog/monolog')
        assert not config.is_platform_name('firefox')
        assert not config.is_platform_name('phpunit')

    def test_explicit_pattern(self):
        pattern = re.compile(r'^python3$')
        assert config.is_platform_name('python3', pattern)
        assert not config.is_platform_name('php', pattern)


class TestConfigFile:
    """Tests for config file loading."""

    def test_defaults(self):
        cfg = config.get_config()
        assert cfg['config_file'] is None
        assert cfg['extra_platform_names'] == frozenset()

    def test_env_config_file(self, monkeypatch, tmp_path):
        path = tmp_path / 'txplan.conf'
        path.write_text(
            "# platform names for rpm based systems\n"
            "\n"
            "platform_regex=^python3?$\n"
            "extra_platform_names=perl, bash\n"
        )
        monkeypatch.setenv(config.CONFIG_ENV_VAR, str(path))
        config.reset_config()

        assert config.get_config()['config_file'] == path
        assert config.is_platform_name('python3')
        assert config.is_platform_name('perl')
        assert config.is_platform_name('bash')
        assert not config.is_platform_name('php')

    def test_local_config_file(self, tmp_path):
        # Tests run from tmp_path (see conftest)
        (tmp_path / config.LOCAL_CONFIG_FILE).write_text("extra_platform_names=glibc\n")
        config.reset_config()

        assert config.is_platform_name('glibc')
        assert config.is_platform_name('php')

    def test_missing_env_file_uses_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setenv(config.CONFIG_ENV_VAR, str(tmp_path / 'missing.conf'))
        config.reset_config()
        assert config.is_platform_name('php')

    def test_invalid_regex(self, monkeypatch, tmp_path):
        path = tmp_path / 'bad.conf'
        path.write_text("platform_regex=(unclosed\n")
        monkeypatch.setenv(config.CONFIG_ENV_VAR, str(path))
        config.reset_config()

        with pytest.raises(config.ConfigError, match='platform_regex'):
            config.get_platform_pattern()

    def test_config_cached(self, tmp_path):
        first = config.get_config()
        (tmp_path / config.LOCAL_CONFIG_FILE).write_text("extra_platform_names=glibc\n")
        assert config.get_config() is first
        assert not config.is_platform_name('glibc')
