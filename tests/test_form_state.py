"""
Tests for the keyed field state container.
"""

from addressbook.form_state import FormState

DEFAULTS = {"postCode": "", "houseNumber": "", "firstName": "Jo"}


class TestOnChange:
    """Test single-field updates."""

    def test_updates_only_named_field(self):
        form = FormState(DEFAULTS)
        form.on_change("postCode", "1000AA")

        assert form["postCode"] == "1000AA"
        assert form["houseNumber"] == ""
        assert form["firstName"] == "Jo"

    def test_successive_changes_accumulate(self):
        """Edits to different fields must not overwrite each other."""
        form = FormState(DEFAULTS)
        form.on_change("postCode", "1000AA")
        form.on_change("houseNumber", "12")

        assert form.fields == {"postCode": "1000AA", "houseNumber": "12", "firstName": "Jo"}

    def test_key_set_is_preserved(self):
        form = FormState(DEFAULTS)
        form.on_change("firstName", "")
        assert set(form.fields) == set(DEFAULTS)
        assert form["firstName"] == ""

    def test_fields_returns_snapshot(self):
        """Mutating the returned mapping must not touch the container."""
        form = FormState(DEFAULTS)
        snapshot = form.fields
        snapshot["postCode"] = "changed"
        assert form["postCode"] == ""

    def test_get_with_default(self):
        form = FormState(DEFAULTS)
        assert form.get("missing") == ""
        assert form.get("missing", "x") == "x"


class TestReset:
    """Test restoring the defaults."""

    def test_reset_without_changes_is_noop(self):
        form = FormState(DEFAULTS)
        form.reset()
        assert form.fields == DEFAULTS

    def test_reset_restores_defaults_after_changes(self):
        form = FormState(DEFAULTS)
        for name, value in [("postCode", "1000AA"), ("houseNumber", "5"), ("postCode", "2000BB"), ("firstName", "")]:
            form.on_change(name, value)

        form.reset()
        assert form.fields == DEFAULTS

    def test_defaults_copied_by_value(self):
        """Later mutation of the caller's mapping does not leak into reset."""
        defaults = dict(DEFAULTS)
        form = FormState(defaults)
        defaults["postCode"] = "leaked"

        form.on_change("houseNumber", "3")
        form.reset()
        assert form["postCode"] == ""

    def test_reset_twice(self):
        form = FormState(DEFAULTS)
        form.on_change("postCode", "1000AA")
        form.reset()
        form.on_change("postCode", "3000CC")
        form.reset()
        assert form.fields == DEFAULTS
