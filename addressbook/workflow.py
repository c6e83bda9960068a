"""
Address resolution workflow.

Drives the two form submissions of the address book: a lookup by postcode
and house number, then adding personal info to the selected candidate and
handing the finished record to the address collection.

Every failure ends up in the single ``error`` slot; no step raises.
"""

from typing import Callable, List, Mapping, Optional

from .form_state import FormState
from .logger import get_logger
from .lookup import AddressLookupClient, AddressLookupError, GENERIC_LOOKUP_ERROR
from .models import FinishedRecord, ResolvedAddress, WorkflowStatus, transform_address

POSTCODE = "postCode"
HOUSE_NUMBER = "houseNumber"
FIRST_NAME = "firstName"
LAST_NAME = "lastName"
SELECTED_ADDRESS = "selectedAddress"

DEFAULT_FIELDS = {
    POSTCODE: "",
    HOUSE_NUMBER: "",
    FIRST_NAME: "",
    LAST_NAME: "",
    SELECTED_ADDRESS: "",
}

SEARCH_FIELDS_MANDATORY = "Post code and house number are mandatory!"
NAME_FIELDS_MANDATORY = "First name and last name fields mandatory!"
NO_ADDRESS_SELECTED = "No address selected, try to select an address or find one if you haven't"
SELECTED_ADDRESS_NOT_FOUND = "Selected address not found"


class AddressWorkflow:
    """
    Form state plus lookup results for one address book session.

    Args:
        lookup: Client with ``get_addresses(postcode, house_number)``
        add_address: Collection capability receiving each FinishedRecord
        defaults: Initial field values (default: DEFAULT_FIELDS)
        discard_stale_responses: Drop results of a search once a newer
            search has been dispatched. Off by default, so overlapping
            searches are last-write-wins.
    """

    def __init__(
        self,
        lookup: AddressLookupClient,
        add_address: Callable[[FinishedRecord], None],
        defaults: Optional[Mapping[str, str]] = None,
        discard_stale_responses: bool = False,
    ):
        self.form = FormState(DEFAULT_FIELDS if defaults is None else defaults)
        self.lookup = lookup
        self.add_address = add_address
        self.discard_stale_responses = discard_stale_responses
        self.logger = get_logger()

        self.loading = False
        self.error: Optional[str] = None
        self.addresses: List[ResolvedAddress] = []
        self._search_seq = 0

    # Field handling

    @property
    def fields(self):
        return self.form.fields

    def on_change(self, name: str, value: str) -> None:
        self.form.on_change(name, value)

    def reset(self) -> None:
        self.form.reset()

    def select_address(self, address_id: str) -> None:
        """Selecting a candidate is a plain field change."""
        self.form.on_change(SELECTED_ADDRESS, address_id)

    @property
    def has_selection(self) -> bool:
        return bool(self.form.get(SELECTED_ADDRESS))

    def clear_all(self) -> None:
        """Reset all fields and drop search results and errors."""
        self.form.reset()
        self.addresses = []
        self.error = None

    @property
    def status(self) -> WorkflowStatus:
        return WorkflowStatus.derive(self.loading, self.error)

    def _fail(self, message: str) -> None:
        self.error = message
        self.logger.record_validation_error()
        self.logger.info("Validation failed", error=message)

    # Steps

    def submit_address_search(self) -> List[ResolvedAddress]:
        """Look up candidates for the current postcode and house number.

        Returns the candidate list visible after the step.
        """
        postcode = self.form.get(POSTCODE)
        house_number = self.form.get(HOUSE_NUMBER)

        # Every submission, valid or not, supersedes searches still in flight.
        self._search_seq += 1
        seq = self._search_seq

        self.error = None
        self.addresses = []
        if not postcode or not house_number:
            self.loading = False
            self._fail(SEARCH_FIELDS_MANDATORY)
            return []

        self.loading = True

        addresses: List[ResolvedAddress] = []
        error: Optional[str] = None
        try:
            details = self.lookup.get_addresses(postcode, house_number)
            addresses = [transform_address(raw, house_number) for raw in details]
        except AddressLookupError as e:
            error = e.message
        except Exception as e:
            self.logger.error("Address search failed", error_type=type(e).__name__, error=str(e))
            addresses = []
            error = GENERIC_LOOKUP_ERROR

        if self.discard_stale_responses and seq != self._search_seq:
            self.logger.debug("Discarding stale lookup result", seq=seq, latest=self._search_seq)
            return list(self.addresses)

        self.addresses = addresses
        self.error = error
        self.loading = False
        return list(addresses)

    def submit_personal_info(self) -> Optional[FinishedRecord]:
        """Validate names and selection, then hand the record to the collection.

        Returns the record that was added, or None if validation failed.
        """
        first_name = self.form.get(FIRST_NAME)
        last_name = self.form.get(LAST_NAME)
        selected = self.form.get(SELECTED_ADDRESS)

        if not first_name or not last_name:
            self._fail(NAME_FIELDS_MANDATORY)
            return None
        if not selected or not self.addresses:
            self._fail(NO_ADDRESS_SELECTED)
            return None

        found = next((a for a in self.addresses if a.id == selected), None)
        if found is None:
            self._fail(SELECTED_ADDRESS_NOT_FOUND)
            return None

        self.error = None
        record = FinishedRecord.from_address(found, first_name, last_name)
        self.add_address(record)
        self.logger.record_address_added()
        self.logger.info("Address added to address book", id=record.id)
        return record
