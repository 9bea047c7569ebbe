"""Property-based tests for environment overrides."""

import copy

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from qaharness.config import OVERRIDES, apply_overrides, collect_overrides, validate_config
from tests.fixtures.env import QD1_DATA, T3_DATA, T5_DATA

# Values any shell could export: non-empty, no NUL
override_values = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",), blacklist_characters="\x00"),
    min_size=1,
    max_size=50,
)

string_overrides = [o for o in OVERRIDES if o.convert is None]
optional_overrides = [o for o in OVERRIDES if o.path[0] != "app"]

# Every optional section present, so every override has a target
FULL_DATA = copy.deepcopy(QD1_DATA)
FULL_DATA["db"]["postgres"] = copy.deepcopy(T5_DATA["db"]["postgres"])


@pytest.mark.property
@pytest.mark.unit
class TestOverrideProperties:
    @given(
        override=st.sampled_from(string_overrides),
        value=override_values,
    )
    def test_override_replaces_file_value(self, override, value):
        """A set, non-empty override always wins over the file value."""
        merged = apply_overrides(FULL_DATA, {override.var: value})
        section = merged
        for part in override.path[:-1]:
            section = section[part]
        assert section[override.path[-1]] == value

    @given(
        override=st.sampled_from(optional_overrides),
        value=override_values,
    )
    def test_absent_optional_section_skipped(self, override, value):
        skipped = []
        merged = apply_overrides(T3_DATA, {override.var: value}, skipped)
        assert merged == T3_DATA
        assert skipped == [override.var]

    @given(value=override_values)
    def test_input_never_mutated(self, value):
        data = copy.deepcopy(FULL_DATA)
        apply_overrides(data, {o.var: value for o in OVERRIDES})
        assert data == FULL_DATA

    @given(port=st.integers(min_value=1, max_value=65535))
    def test_valid_ports_survive_validation(self, port):
        merged = apply_overrides(QD1_DATA, {"ORACLE_PORT": str(port)})
        assert validate_config(merged).oracle.port == port

    @given(environ=st.dictionaries(st.sampled_from([o.var for o in OVERRIDES]), override_values))
    @settings(max_examples=50)
    def test_collected_paths_match_set_variables(self, environ):
        by_var = {o.var: o.dotted for o in OVERRIDES}
        assert set(collect_overrides(environ)) == {by_var[var] for var in environ}

    @given(password=override_values)
    def test_app_password_override_validates(self, password):
        merged = apply_overrides(T3_DATA, {"APP_PASSWORD": password})
        assert validate_config(merged).app.password == password
