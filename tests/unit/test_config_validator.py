"""Tests for structural configuration validation."""

from edgekit.deploy.validator import flatten_domain_entries, validate_configuration


class TestValidateConfiguration:
    """Tests for validate_configuration."""

    def test_valid_configuration(self):
        """A flat list of domains is valid."""
        result = validate_configuration({"domains": ["api.example.com", "app.example.com"]})

        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_none_configuration(self):
        """None is reported as an empty configuration."""
        result = validate_configuration(None)

        assert result.to_dict() == {
            "valid": False,
            "errors": ["Configuration cannot be empty"],
            "warnings": [],
        }

    def test_non_mapping_configuration(self):
        """Non-object configurations are treated as empty."""
        result = validate_configuration(["api.example.com"])

        assert result.valid is False
        assert result.errors == ["Configuration cannot be empty"]

    def test_empty_domain_list(self):
        """An empty domain list is a single error."""
        result = validate_configuration({"domains": []})

        assert result.valid is False
        assert result.errors == ["At least one domain must be specified"]

    def test_missing_domains_key(self):
        """A configuration without domains is invalid."""
        result = validate_configuration({"environments": {}})

        assert result.valid is False
        assert result.errors == ["At least one domain must be specified"]

    def test_collects_every_non_string_entry(self):
        """Each bad entry adds its own error, without short-circuiting."""
        result = validate_configuration({"domains": ["api.example.com", 123, None, ""]})

        assert result.valid is False
        assert len(result.errors) == 3
        assert "position 1" in result.errors[0]
        assert "int" in result.errors[0]
        assert "position 2" in result.errors[1]
        assert "position 3" in result.errors[2]

    def test_tiered_domains_are_validated(self):
        """Domains in a tier mapping are flattened before checking."""
        result = validate_configuration(
            {"domains": {"production": ["api.example.com"], "staging": [42]}}
        )

        assert result.valid is False
        assert len(result.errors) == 1

    def test_unknown_environment_is_a_warning(self):
        """Unknown environment keys warn but do not invalidate."""
        result = validate_configuration(
            {
                "domains": ["api.example.com"],
                "environments": {"production": {}, "qa": {}, "prod": {}},
            }
        )

        assert result.valid is True
        assert result.warnings == ["Unknown environment: qa", "Unknown environment: prod"]

    def test_does_not_mutate_input(self):
        """Validation is side-effect free."""
        config = {"domains": ["b.com", "a.com"]}
        validate_configuration(config)

        assert config == {"domains": ["b.com", "a.com"]}


class TestFlattenDomainEntries:
    """Tests for flattening the domains value."""

    def test_list(self):
        assert flatten_domain_entries(["a", "b"]) == ["a", "b"]

    def test_tier_mapping(self):
        entries = flatten_domain_entries({"production": ["a", "b"], "staging": "c"})
        assert entries == ["a", "b", "c"]

    def test_single_string(self):
        assert flatten_domain_entries("a.com") == ["a.com"]

    def test_unsupported_values(self):
        assert flatten_domain_entries(None) == []
        assert flatten_domain_entries(42) == []
