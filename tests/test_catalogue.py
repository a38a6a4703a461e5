"""Tests for the technique catalogue."""

import pytest

from proberunner.errors import ConfigurationError, UnknownCategoryError
from proberunner.modules.catalogue import (
    Catalogue,
    HeaderPayload,
    MethodPayload,
    OpaquePayload,
    ParamPayload,
    StoragePayload,
    TechniqueCategory,
    TestCase,
    default_catalogue,
    payload_from_dict,
)

EXPECTED_COUNTS = {
    "parameter": 15,
    "header": 15,
    "method": 20,
    "content": 9,
    "auth": 6,
    "storage": 20,
    "frontend": 5,
    "race": 10,
    "encoding": 9,
    "endpoint": 7,
}


class TestDefaultCatalogue:
    """Test the shipped catalogue."""

    def test_category_order(self):
        """Test that categories are listed in display order."""
        assert default_catalogue().ids() == list(EXPECTED_COUNTS)

    def test_counts(self):
        """Test the number of test cases per category."""
        catalogue = default_catalogue()
        for category_id, expected in EXPECTED_COUNTS.items():
            assert catalogue.count_for(category_id) == expected
            assert len(catalogue.tests_for(category_id)) == expected

    def test_descriptors_match_counts(self):
        """Test that listing descriptors report the same counts."""
        descriptors = default_catalogue().list_categories()
        assert {d.id: d.count for d in descriptors} == EXPECTED_COUNTS
        names = {d.id: d.name for d in descriptors}
        assert names["parameter"] == "Parameter Injection"
        assert names["endpoint"] == "Alt Endpoint"

    def test_total_for(self):
        catalogue = default_catalogue()
        assert catalogue.total_for(["parameter", "header"]) == 30
        assert catalogue.total_for(catalogue.ids()) == sum(EXPECTED_COUNTS.values())

    def test_is_cached(self):
        assert default_catalogue() is default_catalogue()

    def test_every_case_belongs_to_its_category(self):
        catalogue = default_catalogue()
        for category_id in catalogue.ids():
            assert all(case.category == category_id for case in catalogue.tests_for(category_id))

    def test_method_cases(self):
        """Test direct verbs come first, then override carriers."""
        cases = default_catalogue().tests_for("method")
        assert [c.description for c in cases[:4]] == [
            "Direct DELETE",
            "Direct PUT",
            "Direct PATCH",
            "Direct OPTIONS",
        ]
        assert all(c.payload.override is None for c in cases[:4])
        assert cases[4].payload == MethodPayload("DELETE", "X-HTTP-Method-Override")
        assert cases[4].description == "X-HTTP-Method-Override: DELETE"
        assert cases[7].payload == MethodPayload("DELETE", "_method")
        assert all(c.payload.override for c in cases[4:])

    def test_parameter_descriptions(self):
        first = default_catalogue().tests_for("parameter")[0]
        assert first.payload == ParamPayload("debug", "true")
        assert first.description == "Parameter debug=true"

    def test_header_descriptions(self):
        first = default_catalogue().tests_for("header")[0]
        assert first.payload == HeaderPayload("X-Forwarded-For", "127.0.0.1")
        assert first.description == "Header X-Forwarded-For"

    def test_empty_content_type_case(self):
        last = default_catalogue().tests_for("content")[-1]
        assert last.description == "(empty)"


class TestCatalogueErrors:
    """Test lookups of unknown categories."""

    def test_unknown_category(self):
        catalogue = default_catalogue()
        with pytest.raises(UnknownCategoryError) as exc_info:
            catalogue.tests_for("nonsense")
        assert exc_info.value.category_id == "nonsense"
        assert "nonsense" in str(exc_info.value)

    def test_unknown_category_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            default_catalogue().count_for("nonsense")

    def test_has_and_contains(self):
        catalogue = default_catalogue()
        assert catalogue.has("race")
        assert "race" in catalogue
        assert not catalogue.has("nonsense")

    def test_duplicate_ids_rejected(self):
        category = TechniqueCategory("x", "X", "", ())
        with pytest.raises(ValueError, match="Duplicate"):
            Catalogue([category, category])

    def test_mismatched_case_rejected(self):
        case = TestCase("other", OpaquePayload("v"), "misfiled")
        with pytest.raises(ValueError):
            Catalogue([TechniqueCategory("x", "X", "", (case,))])


class TestPayloads:
    """Test payload descriptors."""

    def test_kinds(self):
        assert ParamPayload("a", "b").kind == "param"
        assert HeaderPayload("a", "b").kind == "header"
        assert MethodPayload("PUT").kind == "method"
        assert StoragePayload("a", "b").kind == "storage"
        assert OpaquePayload("v").kind == "opaque"

    def test_payload_from_dict(self):
        for payload in (
            ParamPayload("role", "admin"),
            HeaderPayload("X-Admin", "true"),
            MethodPayload("PATCH", "X-HTTP-Method"),
            StoragePayload("debug", "true"),
            OpaquePayload("Skip a confirmation dialog"),
        ):
            assert payload_from_dict(payload.to_dict()) == payload

    def test_payload_from_dict_unknown_kind(self):
        with pytest.raises(ValueError):
            payload_from_dict({"kind": "mystery"})

    def test_summaries(self):
        assert ParamPayload("role", "admin").summary() == "role=admin"
        assert HeaderPayload("X-Admin", "true").summary() == "X-Admin: true"
        assert MethodPayload("PUT").summary() == "PUT"
        assert MethodPayload("PUT", "_method").summary() == "_method: PUT"
