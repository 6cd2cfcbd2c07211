"""
Unit tests for the wizard reducers.

Run: pytest tests/unit/test_wizard_service.py -v
"""

import pytest

from config.import_sources import CSV, EXCEL_SUPPLIER, RAINBOW_INVOICE, STEP_CONFIRM
from exceptions import ImportSourceDisabledError, StepBlockedError
from models.import_wizard import ImportSource, InvoiceInfo, RowEdit
from services import wizard_service
from tests.factories import ProductToImportFactory as RowFactory


class TestSelectSource:
    """Tests for select_source()"""

    def test_disabled_source_rejected(self, wizard_state):
        with pytest.raises(ImportSourceDisabledError):
            wizard_service.select_source(wizard_state, ImportSource(id=CSV, name="CSV"))

    def test_switching_source_drops_batch(self, search_state):
        """Should clear rows and upload headers when the source changes."""
        state = wizard_service.load_rows(
            search_state,
            RowFactory.create_batch(2),
            invoice_info=InvoiceInfo(number="F-1")
        )

        result = wizard_service.select_source(
            state,
            ImportSource(id=RAINBOW_INVOICE, name="Factura")
        )

        assert result.rows == ()
        assert result.invoice_info.number is None
        assert wizard_service.is_invoice_source(result) is True

    def test_same_source_keeps_batch(self, search_state, search_source):
        state = wizard_service.load_rows(search_state, RowFactory.create_batch(2))

        result = wizard_service.select_source(state, search_source)

        assert len(result.rows) == 2

    def test_original_state_unchanged(self, wizard_state, search_source):
        wizard_service.select_source(wizard_state, search_source)

        assert wizard_state.source is None


class TestSteps:
    """Tests for next_step() / previous_step()"""

    def test_source_step_needs_source(self, wizard_state):
        with pytest.raises(StepBlockedError):
            wizard_service.next_step(wizard_state)

    def test_load_step_needs_rows(self, search_state):
        state = wizard_service.next_step(search_state)

        assert state.current_step == 1
        with pytest.raises(StepBlockedError):
            wizard_service.next_step(state)

    def test_configure_step_needs_priced_selection(self, search_state):
        """Should block step 2 until every selected new row has a price."""
        state = wizard_service.next_step(search_state)
        state = wizard_service.load_rows(state, [RowFactory.create(cost_price=10)])
        state = wizard_service.next_step(state)

        assert wizard_service.can_advance(state) is False
        with pytest.raises(StepBlockedError):
            wizard_service.next_step(state)

        state = wizard_service.apply_margin(state, 2)
        state = wizard_service.next_step(state)

        assert state.current_step == STEP_CONFIRM

    def test_last_step_is_a_ceiling(self, search_state):
        state = search_state.model_copy(update={"current_step": STEP_CONFIRM})

        assert wizard_service.next_step(state).current_step == STEP_CONFIRM

    def test_previous_step_stops_at_first(self, wizard_state):
        assert wizard_service.previous_step(wizard_state).current_step == 0


class TestReset:
    """Tests for reset()"""

    def test_reset_clears_everything_but_retires_checks(self, search_state):
        """Should start over while keeping sequence numbers growing."""
        state = wizard_service.load_rows(search_state, RowFactory.create_batch(3))
        seq_before = state.code_check.latest_seq

        result = wizard_service.reset(state)

        assert result.source is None
        assert result.rows == ()
        assert result.current_step == 0
        assert result.code_check.latest_seq > seq_before


class TestLoadRows:
    """Tests for load_rows()"""

    def test_suggested_supplier_fills_empty_choice(self, search_state):
        result = wizard_service.load_rows(search_state, [], supplier_id="sup-9")

        assert result.supplier_id == "sup-9"

    def test_suggested_supplier_does_not_override(self, search_state):
        state = wizard_service.set_supplier(search_state, "sup-1")

        result = wizard_service.load_rows(state, [], supplier_id="sup-9")

        assert result.supplier_id == "sup-1"


class TestEditsAndMargin:
    """Tests for edit_row() and apply_margin()"""

    def test_edit_row_reports_code_change(self, search_state):
        state = wizard_service.load_rows(search_state, [RowFactory.create(code="AB-1")])

        result, code_changed = wizard_service.edit_row(state, 0, RowEdit(code="AB-9"))

        assert code_changed is True
        assert result.rows[0].code == "AB-9"

    def test_edit_row_uses_confirmed_codes(self, search_state):
        """Should mark an edited code as existing when the last check confirmed it."""
        state = wizard_service.load_rows(search_state, [RowFactory.create(code="AB-1")])
        state = state.model_copy(update={
            "code_check": state.code_check.model_copy(update={"existing_codes": frozenset({"AB-9"})})
        })

        result, _ = wizard_service.edit_row(state, 0, RowEdit(code="ab-9"))

        assert result.rows[0].exists is True

    def test_custom_multiplier_remembered(self, search_state):
        result = wizard_service.apply_margin(search_state, 3.5)

        assert result.custom_margin == 3.5

    def test_preset_multiplier_keeps_custom(self, search_state):
        result = wizard_service.apply_margin(search_state, 2.5)

        assert result.custom_margin == search_state.custom_margin


class TestSummary:
    """Tests for summary()"""

    def test_statuses_include_source_flagged_rows(self):
        """Should count rows the source marked as existing as confirmed codes."""
        state = wizard_service.select_source(
            wizard_service.new_state(),
            ImportSource(id=EXCEL_SUPPLIER, name="Excel")
        )
        state = wizard_service.load_rows(state, [
            RowFactory.create(code="AB-1", exists=True),
            RowFactory.create(code="CD-2"),
        ])

        summary = wizard_service.summary(state)

        assert [s.value for s in summary.statuses] == ["exists-in-catalog", "new"]
