"""
Tests for environment loading and MonitorConfig construction.
"""

import pytest

from mudmonitor.config import MonitorConfig, create_monitor_config_from_env
from mudmonitor.env import Env, load_env
from mudmonitor.errors import MonitorConfigError
from mudmonitor.protocol.models import ProbeMode
from mudmonitor.trending.models import TrendingWeights


# =============================================================================
# Test Env Loading
# =============================================================================


class TestLoadEnv:
    """Tests for load_env."""

    def test_defaults(self):
        env = load_env(Env, env_file="", environ={})

        assert env.MONITOR_POLL_INTERVAL == 300.0
        assert env.MONITOR_POLL_TIMEOUT == 10.0
        assert env.MONITOR_POLL_MAX_CONCURRENCY == 20
        assert env.MONITOR_FAILURE_THRESHOLD == 3
        assert env.MONITOR_TRENDING_INTERVAL == 3600.0
        assert env.MONITOR_TRENDING_HALF_LIFE_DAYS == 30.0
        assert env.MONITOR_TRENDING_ENABLED is True
        assert env.MONITOR_POLL_PRECHECK_REACHABLE is False
        assert env.MONITOR_POLL_PROTOCOL == "telnet"

    def test_environment_values_are_converted(self):
        env = load_env(
            Env,
            env_file="",
            environ={
                "MONITOR_POLL_INTERVAL": "60",
                "MONITOR_POLL_MAX_CONCURRENCY": "5",
                "MONITOR_TRENDING_ENABLED": "false",
                "MONITOR_POLL_PRECHECK_REACHABLE": "yes",
                "MONITOR_POLL_PROTOCOL": "plaintext",
                "MONITOR_LOG_LEVEL": "DEBUG",
                "UNRELATED": "ignored",
            },
        )

        assert env.MONITOR_POLL_INTERVAL == 60.0
        assert env.MONITOR_POLL_MAX_CONCURRENCY == 5
        assert env.MONITOR_TRENDING_ENABLED is False
        assert env.MONITOR_POLL_PRECHECK_REACHABLE is True
        assert env.MONITOR_POLL_PROTOCOL == "plaintext"
        assert env.MONITOR_LOG_LEVEL == "debug"

    def test_env_file_overrides_environment(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "MONITOR_FAILURE_THRESHOLD=5\n"
            "MONITOR_TRENDING_REVIEW_WEIGHT=2.5\n"
        )

        env = load_env(
            Env,
            env_file=str(env_file),
            environ={"MONITOR_FAILURE_THRESHOLD": "4"},
        )

        assert env.MONITOR_FAILURE_THRESHOLD == 5
        assert env.MONITOR_TRENDING_REVIEW_WEIGHT == 2.5

    def test_override_model_wins(self):
        env = load_env(
            Env,
            env_file="",
            environ={"MONITOR_POLL_TIMEOUT": "3"},
            override=Env(MONITOR_POLL_TIMEOUT=7.0),
        )

        assert env.MONITOR_POLL_TIMEOUT == 7.0

    def test_unparseable_value_raises_config_error(self):
        with pytest.raises(MonitorConfigError):
            load_env(Env, env_file="", environ={"MONITOR_POLL_INTERVAL": "often"})

    def test_invalid_choice_raises_config_error(self):
        with pytest.raises(MonitorConfigError):
            load_env(Env, env_file="", environ={"MONITOR_POLL_PROTOCOL": "gopher"})

    def test_config_error_is_value_error(self):
        assert issubclass(MonitorConfigError, ValueError)


# =============================================================================
# Test MonitorConfig
# =============================================================================


class TestMonitorConfig:
    """Tests for create_monitor_config_from_env and validation."""

    def test_config_from_default_env(self):
        config = create_monitor_config_from_env(Env())

        assert config.poll_interval_seconds == 300.0
        assert config.poll_timeout_seconds == 10.0
        assert config.poll_max_concurrency == 20
        assert config.poll_initial_delay_seconds == 30.0
        assert config.failure_threshold == 3
        assert config.trending_interval_seconds == 3600.0
        assert config.trending_initial_delay_seconds == 60.0
        assert config.trending_weights == TrendingWeights(
            favorite=5.0,
            review=10.0,
            player=0.5,
            recency=20.0,
        )
        assert config.trending_half_life_days == 30.0
        assert config.status_history_retention_days == 7.0
        assert config.probe_mode == ProbeMode.TELNET

    def test_config_from_custom_env(self):
        env = load_env(
            Env,
            env_file="",
            environ={
                "MONITOR_TRENDING_PLAYER_WEIGHT": "1.5",
                "MONITOR_POLL_PROTOCOL": "plaintext",
            },
        )

        config = create_monitor_config_from_env(env)

        assert config.trending_weights.player == 1.5
        assert config.probe_mode == ProbeMode.PLAINTEXT

    @pytest.mark.parametrize(
        "overrides",
        [
            {"poll_interval_seconds": 0.0},
            {"poll_timeout_seconds": -1.0},
            {"trending_interval_seconds": 0.0},
            {"trending_half_life_days": 0.0},
            {"status_history_retention_days": 0.0},
            {"poll_initial_delay_seconds": -1.0},
            {"trending_initial_delay_seconds": -1.0},
            {"poll_max_concurrency": 0},
            {"failure_threshold": 0},
            {"max_response_bytes": 0},
            {"probe_mode": "carrier-pigeon"},
            {"trending_weights": TrendingWeights(favorite=-1.0)},
            {"trending_weights": TrendingWeights(recency=float("nan"))},
        ],
    )
    def test_invalid_settings_are_rejected(self, overrides):
        with pytest.raises(MonitorConfigError):
            MonitorConfig(**overrides).validate()

    def test_invalid_env_is_rejected(self):
        env = Env(MONITOR_FAILURE_THRESHOLD=0)

        with pytest.raises(MonitorConfigError):
            create_monitor_config_from_env(env)

    def test_probe_mode_string_is_normalized(self):
        config = MonitorConfig(probe_mode="plaintext").validate()

        assert config.probe_mode == ProbeMode.PLAINTEXT
