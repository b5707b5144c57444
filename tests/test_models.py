import pytest
from pydantic import ValidationError

from domains.semconv.models import InstrumentKind, MetricDefinition, Stability


def _definition(**overrides):
    fields = {
        "identifier": "http.server.request.duration",
        "instrument": "histogram",
        "unit": "s",
        "description": "Duration of HTTP server requests.",
        "stability": "stable",
    }
    fields.update(overrides)
    return MetricDefinition(**fields)


def test_valid_definition():
    definition = _definition()
    assert definition.instrument is InstrumentKind.HISTOGRAM
    assert definition.stability is Stability.STABLE
    assert definition.namespace == "http"
    assert not definition.is_deprecated


@pytest.mark.parametrize("identifier", [None, "", "   ", "Http.Server", "http..server", "http.server.", "1http"])
def test_invalid_identifier_is_rejected(identifier):
    with pytest.raises(ValidationError):
        _definition(identifier=identifier)


@pytest.mark.parametrize("unit", [None, "", "  "])
def test_unit_is_required(unit):
    with pytest.raises(ValidationError):
        _definition(unit=unit)


def test_numeric_unit_becomes_text():
    assert _definition(unit=1).unit == "1"


def test_unknown_instrument_is_rejected():
    with pytest.raises(ValidationError):
        _definition(instrument="summary")


def test_instrument_is_case_insensitive():
    assert _definition(instrument="UpDownCounter").instrument is InstrumentKind.UPDOWNCOUNTER


@pytest.mark.parametrize("value", [None, "", "experimental", "development", "Development"])
def test_legacy_and_missing_stability_mean_development(value):
    assert _definition(stability=value).stability is Stability.DEVELOPMENT


def test_blank_description_is_absent():
    assert _definition(description="  ").description is None


def test_description_whitespace_is_collapsed():
    assert _definition(description="Duration of\n  HTTP requests.").description == "Duration of HTTP requests."


def test_deprecated_reference_is_unquoted():
    definition = _definition(deprecated_by="`http.server.duration`")
    assert definition.deprecated_by == "http.server.duration"
    assert definition.is_deprecated


def test_deprecated_entry_needs_replacement():
    with pytest.raises(ValidationError):
        _definition(deprecated_by="``")


def test_metric_cannot_replace_itself():
    with pytest.raises(ValidationError):
        _definition(deprecated_by="http.server.request.duration")


def test_note_without_deprecation_is_rejected():
    with pytest.raises(ValidationError):
        _definition(deprecation_note="the unit changed")


def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError):
        _definition(brief="something")


def test_definition_is_immutable():
    definition = _definition()
    with pytest.raises(ValidationError):
        definition.unit = "ms"


def test_record_leaves_out_absent_fields_and_source():
    record = _definition(description=None, source="a.yaml").to_record()
    assert record == {
        "identifier": "http.server.request.duration",
        "instrument": "histogram",
        "unit": "s",
        "stability": "stable",
    }
