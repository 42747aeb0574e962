"""Tests for configuration domain models."""

import pytest

from handsfreectl.domain.config import (
    DaemonConfig,
    HandsfreeConfig,
    OutputConfig,
    StatusConfig,
)
from handsfreectl.domain.entities import OutputMode


class TestDaemonConfig:
    """Tests for DaemonConfig validation."""

    def test_defaults(self) -> None:
        """Defaults use the runtime-dir socket and short timeouts."""
        config = DaemonConfig()
        assert config.socket_path == ""
        assert config.connect_timeout == 2.0
        assert config.read_timeout == 5.0

    @pytest.mark.parametrize("field", ["connect_timeout", "read_timeout"])
    @pytest.mark.parametrize("value", [0, -1.5])
    def test_non_positive_timeouts_rejected(self, field: str, value: float) -> None:
        """Timeouts must be positive."""
        with pytest.raises(ValueError, match=field):
            DaemonConfig(**{field: value})


class TestOutputConfig:
    """Tests for OutputConfig validation."""

    def test_empty_default_means_daemon_choice(self) -> None:
        """An empty default maps to no output mode."""
        assert OutputConfig().mode is None

    def test_known_default(self) -> None:
        """A known default maps to its enum."""
        assert OutputConfig(default="clipboard").mode is OutputMode.CLIPBOARD

    def test_unknown_default_rejected(self) -> None:
        """Unknown output modes are rejected."""
        with pytest.raises(ValueError, match="keyboard"):
            OutputConfig(default="speaker")


class TestHandsfreeConfig:
    """Tests for the complete config."""

    def test_default_matches_section_defaults(self) -> None:
        """default() builds every section with its defaults."""
        config = HandsfreeConfig.default()
        assert config.daemon == DaemonConfig()
        assert config.output == OutputConfig()
        assert config.status == StatusConfig()

    def test_from_partial_overrides_only_given_keys(self) -> None:
        """Keys absent from the data keep their base values."""
        base = HandsfreeConfig.default()

        config = HandsfreeConfig.from_partial(
            base, {"daemon": {"read_timeout": 9.5}, "status": {"inactive_if_down": True}}
        )

        assert config.daemon.read_timeout == 9.5
        assert config.daemon.connect_timeout == base.daemon.connect_timeout
        assert config.status.inactive_if_down is True
        assert config.output == base.output

    def test_from_partial_ignores_unknown_sections(self) -> None:
        """Unknown sections do not fail loading."""
        config = HandsfreeConfig.from_partial(
            HandsfreeConfig.default(), {"future": {"key": 1}}
        )
        assert config == HandsfreeConfig.default()

    def test_from_partial_rejects_unknown_keys(self) -> None:
        """Typos inside a known section are reported."""
        with pytest.raises(ValueError, match=r"\[daemon\]"):
            HandsfreeConfig.from_partial(
                HandsfreeConfig.default(), {"daemon": {"read_timout": 1.0}}
            )

    def test_from_partial_validates_values(self) -> None:
        """Merged values go through section validation."""
        with pytest.raises(ValueError, match="read_timeout"):
            HandsfreeConfig.from_partial(
                HandsfreeConfig.default(), {"daemon": {"read_timeout": 0}}
            )

    def test_from_partial_rejects_non_table_section(self) -> None:
        """A section must be a table."""
        with pytest.raises(ValueError, match="must be a table"):
            HandsfreeConfig.from_partial(HandsfreeConfig.default(), {"output": "clipboard"})
