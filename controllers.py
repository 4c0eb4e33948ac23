"""
controllers.py
View-local state and actions for the dashboard pages.

Views only render; these classes own the fetched collection, the search term,
the page cursor and the create/edit form, and run fetch -> mutate -> refetch.
Each backend call is wrapped on its own: a failure notifies once and leaves
state at its last good value.
"""

from __future__ import annotations

import logging
from typing import Callable

import api
import utils
from api import ApiError
from config import PAGE_SIZE
from models import Client, Currency, DashboardAnalytics

logger = logging.getLogger(__name__)

Notify = Callable[[str, str], None]  # (level, message); level is "success" or "error"

IDLE, LOADING, LOADED, ERROR = "idle", "loading", "loaded", "error"


class _BaseController:
    def __init__(self, client=api, notify: Notify | None = None) -> None:
        self.api = client
        self.notify: Notify = notify or (lambda level, message: None)
        self.status = IDLE

    def _fail(self, exc: ApiError) -> None:
        logger.debug("%s: %s", type(self).__name__, exc.message)
        self.notify("error", exc.message)


class LoginController(_BaseController):
    def submit(self, email: str, password: str) -> bool:
        email = (email or "").strip()
        if not email or not password:
            self.notify("error", "Email and password are required.")
            return False
        try:
            self.api.admin_login(email, password)
        except ApiError as exc:
            self._fail(exc)
            return False
        self.notify("success", "Logged in successfully")
        return True


class ClientsController(_BaseController):
    """Paged client list with search, shared create/edit form, toggles and delete."""

    def __init__(self, client=api, notify: Notify | None = None) -> None:
        super().__init__(client, notify)
        self.clients: list[Client] = []
        self.currencies: list[Currency] = []
        self.page = 1
        self.limit = PAGE_SIZE
        self.total = 0
        self.total_pages = 0
        self.search = ""

        self.form_open = False
        self.form: dict = utils.empty_client_form()
        self.editing_id: str | None = None
        self.original_token: str | None = None

        self.pending_delete: Client | None = None

    # --- list ---

    def load(self) -> bool:
        self.status = LOADING
        try:
            result = self.api.get_clients(self.page, self.limit)
        except ApiError as exc:
            self.status = ERROR
            self._fail(exc)
            return False
        self.clients = result.clients
        self.total = result.total
        self.total_pages = result.total_pages
        self.status = LOADED
        return True

    def visible_clients(self) -> list[Client]:
        return utils.filter_clients(self.clients, self.search)

    def can_prev(self) -> bool:
        return utils.can_go_prev(self.page)

    def can_next(self) -> bool:
        return utils.can_go_next(self.page, self.total_pages)

    def next_page(self) -> bool:
        if not self.can_next():
            return False
        self.page += 1
        if not self.load():
            self.page -= 1
            return False
        return True

    def prev_page(self) -> bool:
        if not self.can_prev():
            return False
        self.page -= 1
        if not self.load():
            self.page += 1
            return False
        return True

    def load_currencies(self) -> bool:
        try:
            self.currencies = self.api.get_currencies()
        except ApiError as exc:
            self._fail(exc)
            return False
        return True

    # --- form ---

    @property
    def editing(self) -> bool:
        return self.editing_id is not None

    def start_create(self) -> None:
        self.form = utils.empty_client_form()
        self.editing_id = None
        self.original_token = None
        self.form_open = True

    def start_edit(self, client: Client) -> None:
        self.form = utils.client_to_form(client)
        self.editing_id = client.id
        self.original_token = client.whatsapp_token or ""
        self.form_open = True

    def cancel_form(self) -> None:
        self.form_open = False
        self.form = utils.empty_client_form()
        self.editing_id = None
        self.original_token = None

    def submit(self, form: dict) -> bool:
        self.form = dict(form)
        errors = utils.validate_client_inputs(form)
        if errors:
            self.notify("error", errors[0])
            return False

        payload = utils.build_client_payload(form, editing=self.editing, original_token=self.original_token)
        try:
            if self.editing:
                self.api.update_client(self.editing_id, payload)
                message = "Client updated successfully"
            else:
                self.api.add_client(payload)
                message = "Client added successfully"
        except ApiError as exc:
            self._fail(exc)
            return False

        self.notify("success", message)
        self.cancel_form()
        self.load()
        return True

    # --- row actions ---

    def toggle_status(self, client: Client) -> bool:
        new_status = "inactive" if client.is_active else "active"
        try:
            self.api.change_client_status(client.id, new_status)
        except ApiError as exc:
            self._fail(exc)
            return False
        self.notify("success", f"Client marked as {new_status}")
        self.load()
        return True

    def toggle_enquiry_mode(self, client: Client) -> bool:
        enabled = not client.enquiry_mode
        try:
            self.api.change_enquiry_mode(client.id, enabled)
        except ApiError as exc:
            self._fail(exc)
            return False
        self.notify("success", f"Enquiry mode {'enabled' if enabled else 'disabled'}")
        self.load()
        return True

    def request_delete(self, client: Client) -> None:
        self.pending_delete = client

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self) -> bool:
        client = self.pending_delete
        if client is None:
            return False
        try:
            self.api.delete_client(client.id)
        except ApiError as exc:
            self._fail(exc)
            return False
        self.pending_delete = None
        self.notify("success", "Client deleted successfully")
        if self.load() and self.page > max(self.total_pages, 1):
            # the last page emptied out; step back to the new last page
            self.page = max(self.total_pages, 1)
            self.load()
        return True


class CurrenciesController(_BaseController):
    """Full currency list (no paging) with search and a shared create/edit form."""

    def __init__(self, client=api, notify: Notify | None = None) -> None:
        super().__init__(client, notify)
        self.currencies: list[Currency] = []
        self.search = ""
        self.form_open = False
        self.form: dict = {"name": "", "symbol": "", "code": ""}
        self.editing_id: str | None = None

    def load(self) -> bool:
        self.status = LOADING
        try:
            self.currencies = self.api.get_currencies()
        except ApiError as exc:
            self.status = ERROR
            self._fail(exc)
            return False
        self.status = LOADED
        return True

    def visible_currencies(self) -> list[Currency]:
        return utils.filter_currencies(self.currencies, self.search)

    @property
    def editing(self) -> bool:
        return self.editing_id is not None

    def start_create(self) -> None:
        self.form = {"name": "", "symbol": "", "code": ""}
        self.editing_id = None
        self.form_open = True

    def start_edit(self, currency: Currency) -> None:
        self.form = {"name": currency.name, "symbol": currency.symbol, "code": currency.code}
        self.editing_id = currency.id
        self.form_open = True

    def cancel_form(self) -> None:
        self.form_open = False
        self.form = {"name": "", "symbol": "", "code": ""}
        self.editing_id = None

    def submit(self, form: dict) -> bool:
        self.form = dict(form)
        errors = utils.validate_currency_inputs(form)
        if errors:
            self.notify("error", errors[0])
            return False

        payload = utils.build_currency_payload(form)
        try:
            if self.editing:
                self.api.update_currency(self.editing_id, payload)
                message = "Currency updated successfully"
            else:
                self.api.add_currency(payload)
                message = "Currency added successfully"
        except ApiError as exc:
            self._fail(exc)
            return False

        self.notify("success", message)
        self.cancel_form()
        self.load()
        return True

    def setup_defaults(self) -> bool:
        try:
            self.api.setup_default_currencies()
        except ApiError as exc:
            self._fail(exc)
            return False
        self.notify("success", "Default currencies set up")
        self.load()
        return True


class DashboardController(_BaseController):
    def __init__(self, client=api, notify: Notify | None = None) -> None:
        super().__init__(client, notify)
        self.analytics: DashboardAnalytics | None = None

    def load(self) -> bool:
        self.status = LOADING
        try:
            self.analytics = self.api.get_dashboard_analytics()
        except ApiError as exc:
            self.status = ERROR
            self._fail(exc)
            return False
        self.status = LOADED
        return True
