"""Tests for the configuration system."""

import json
from dataclasses import FrozenInstanceError

import pytest

from lrg_report.shared.config import (
    ConfigError,
    ConfigValidationError,
    ContentMode,
    ParserConfig,
    TokenizationConfig,
    TreeConfig,
    WriterConfig,
)


class TestComponentConfigs:
    """Test suite for the component configuration classes."""

    def test_tokenization_defaults(self):
        """Test default tokenization configuration values."""
        config = TokenizationConfig()
        assert config.skip_declaration_lines is True
        assert config.skip_markup_declarations is True
        assert config.legacy_quote_stripping is False

    def test_tokenization_rejects_non_boolean(self):
        """Test that flags must be booleans."""
        with pytest.raises(ConfigValidationError) as exc_info:
            TokenizationConfig(legacy_quote_stripping="yes")
        assert exc_info.value.field_name == "legacy_quote_stripping"

    def test_tree_defaults(self):
        """Test default tree configuration values."""
        config = TreeConfig()
        assert config.content_mode == ContentMode.OVERWRITE
        assert config.strict_close_names is False
        assert config.allow_unclosed is True

    def test_tree_accepts_content_mode_name(self):
        """Test that content_mode may be given by (case-insensitive) name."""
        assert TreeConfig(content_mode="concatenate").content_mode == ContentMode.CONCATENATE

    def test_tree_rejects_unknown_content_mode(self):
        """Test that an unknown content_mode lists the valid choices."""
        with pytest.raises(ConfigValidationError) as exc_info:
            TreeConfig(content_mode="merge")
        assert "OVERWRITE" in exc_info.value.suggestions

    def test_writer_defaults(self):
        """Test default writer configuration values."""
        config = WriterConfig()
        assert config.encoding == "UTF-8"
        assert config.indent == 2
        assert config.stylesheet_data == 'type="text/xsl" href="lrg2html.xsl"'

    def test_writer_rejects_negative_indent(self):
        """Test indent validation."""
        with pytest.raises(ConfigValidationError, match="indent"):
            WriterConfig(indent=-1)

    def test_writer_requires_stylesheet_when_included(self):
        """Test that an empty stylesheet href is rejected unless disabled."""
        with pytest.raises(ConfigValidationError):
            WriterConfig(stylesheet_href="")
        assert WriterConfig(stylesheet_href="", include_stylesheet=False).include_stylesheet is False

    def test_validation_error_is_config_error(self):
        """Test the exception hierarchy."""
        assert issubclass(ConfigValidationError, ConfigError)


class TestParserConfig:
    """Test suite for the aggregated ParserConfig."""

    def test_is_frozen(self):
        """Test that ParserConfig cannot be mutated in place."""
        config = ParserConfig()
        with pytest.raises(FrozenInstanceError):
            config.name = "changed"  # type: ignore[misc]

    def test_override_nested_fields(self):
        """Test component__field override notation."""
        config = ParserConfig()
        new_config = config.override(
            writer__indent=4,
            tree__content_mode=ContentMode.CONCATENATE,
            name="custom",
        )

        assert new_config.writer.indent == 4
        assert new_config.tree.content_mode == ContentMode.CONCATENATE
        assert new_config.name == "custom"
        # Original is untouched
        assert config.writer.indent == 2
        assert config.tree.content_mode == ContentMode.OVERWRITE

    def test_override_whole_component(self):
        """Test replacing a component with a new instance."""
        config = ParserConfig().override(writer=WriterConfig(indent=0))
        assert config.writer.indent == 0

    def test_override_unknown_component(self):
        """Test that overriding an unknown component fails."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig().override(output__indent=4)
        assert "writer" in exc_info.value.suggestions

    def test_override_unknown_field(self):
        """Test that overriding an unknown field fails."""
        with pytest.raises(ConfigValidationError):
            ParserConfig().override(writer__colour=True)

    def test_override_revalidates(self):
        """Test that overrides go through component validation."""
        with pytest.raises(ConfigValidationError):
            ParserConfig().override(writer__indent=-2)

    def test_rejects_wrong_component_type(self):
        """Test that components must be the right dataclass."""
        with pytest.raises(ConfigValidationError):
            ParserConfig(tree=WriterConfig())  # type: ignore[arg-type]

    def test_json_round_trip(self):
        """Test serialization to JSON and back."""
        config = ParserConfig(
            tree=TreeConfig(content_mode=ContentMode.CONCATENATE),
            writer=WriterConfig(indent=4),
            name="round-trip",
        )

        data = json.loads(config.to_json())
        assert data["tree"]["content_mode"] == "CONCATENATE"

        restored = ParserConfig.from_json(config.to_json())
        assert restored == config

    def test_from_dict_rejects_unknown_key(self):
        """Test that typos in configuration files are reported."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig.from_dict({"writr": {"indent": 4}})
        assert exc_info.value.field_name == "writr"

    def test_from_json_rejects_invalid_json(self):
        """Test invalid JSON handling."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            ParserConfig.from_json("{not json")

    def test_from_json_rejects_non_object(self):
        """Test that the top-level JSON value must be an object."""
        with pytest.raises(ConfigValidationError):
            ParserConfig.from_json("[1, 2]")

    def test_presets(self):
        """Test the default and legacy presets."""
        assert ParserConfig.default().name == "default"

        legacy = ParserConfig.legacy()
        assert legacy.name == "legacy"
        assert legacy.tokenization.legacy_quote_stripping is True
        assert legacy.tree.content_mode == ContentMode.OVERWRITE
