"""Registration: person registration with a growing list of addresses.

A multi-step form flow: register a person, add addresses one at a time,
edit any of them, then complete the registration. Every address input is
named by its canonical property path (``addresses[1].postalCode``), so
binding, validation, and re-rendering all agree on which input a message
belongs to.

Handlers are plain methods returning ``Page`` or ``Redirect``; wire them
into any framework's routes, e.g. ``POST /person/register`` calls
``app.register(await request.form())``.

Demonstrates:
- ``constrained()`` field declarations with aliases and custom messages
- ``bind_to`` for a whole form, ``bind_indexed_property`` for one element
- ``ValidationService`` with ``prefix`` so element violations land on
  ``addresses[n].*`` inputs
- ``FormBuilder``/``IndexedFormBuilder`` inside kida templates
- 422 re-render on invalid input, redirect on success
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from uuid import UUID, uuid4

from pathform import (
    BindingError,
    Cascade,
    Email,
    FormBuilder,
    IndexedFormBuilder,
    Invalid,
    NotBlank,
    NotNull,
    Pattern,
    Size,
    Valid,
    ValidationService,
    bind_indexed_property,
    bind_to,
    constrained,
    create_environment,
    field_ref,
)
from pathform.binding import FormSource
from pathform.binding.tree import iter_pairs

TEMPLATES_DIR = Path(__file__).parent / "templates"

logger = logging.getLogger("pathform.examples.registration")

# ---------------------------------------------------------------------------
# Domain
# ---------------------------------------------------------------------------


class AddressType(Enum):
    HOME = "HOME"
    WORK = "WORK"
    OTHER = "OTHER"


@dataclass(frozen=True, slots=True)
class Address:
    id: UUID | None = None
    type: AddressType | None = constrained(
        NotNull("Address type is required"), default=None
    )
    street_address: str = constrained(
        NotBlank("Street address is required"),
        Size(max=100, message="Street address must be 100 characters or less"),
        alias="streetAddress",
        default="",
    )
    city: str = constrained(
        NotBlank("City is required"),
        Size(max=50, message="City must be 50 characters or less"),
        default="",
    )
    postal_code: str = constrained(
        NotBlank("Postal code is required"),
        Pattern(r"[0-9]{4,5}", message="Postal code must be 4-5 digits"),
        alias="postalCode",
        default="",
    )
    country: str = constrained(
        NotBlank("Country is required"),
        Size(max=50, message="Country must be 50 characters or less"),
        default="",
    )


@dataclass(frozen=True, slots=True)
class Person:
    id: UUID = field(default_factory=uuid4)
    first_name: str = constrained(
        NotBlank("First name is required"),
        Size(max=50, message="First name must be 50 characters or less"),
        alias="firstName",
        default="",
    )
    last_name: str = constrained(
        NotBlank("Last name is required"),
        Size(max=50, message="Last name must be 50 characters or less"),
        alias="lastName",
        default="",
    )
    email: str = constrained(
        NotBlank("Email is required"),
        Email("Must be a valid email address"),
        default="",
    )
    addresses: list[Address] = constrained(Cascade(), default_factory=list)


FIRST_NAME = field_ref(Person, "first_name").to_path()
LAST_NAME = field_ref(Person, "last_name").to_path()
EMAIL = field_ref(Person, "email").to_path()
ADDRESSES = field_ref(Person, "addresses")

# ---------------------------------------------------------------------------
# In-memory storage (thread-safe)
# ---------------------------------------------------------------------------


class PersonRepository:
    """Stores persons by id. New addresses get an id when saved."""

    def __init__(self) -> None:
        self._persons: dict[UUID, Person] = {}
        self._lock = threading.Lock()

    def save(self, person: Person) -> Person:
        addresses = [
            address if address.id is not None else replace(address, id=uuid4())
            for address in person.addresses
        ]
        stored = replace(person, addresses=addresses)
        with self._lock:
            self._persons[stored.id] = stored
        return stored

    def find_by_id(self, person_id: UUID) -> Person | None:
        with self._lock:
            return self._persons.get(person_id)

    def find_all(self) -> list[Person]:
        with self._lock:
            return list(self._persons.values())


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Page:
    html: str
    status: int = 200


@dataclass(frozen=True, slots=True)
class Redirect:
    url: str
    status: int = 302


REGISTER_URL = "/person/register"

# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


class RegistrationApp:
    def __init__(self, repository: PersonRepository | None = None) -> None:
        self.repository = repository or PersonRepository()
        self.validator = ValidationService()
        self.env = create_environment(TEMPLATES_DIR)

    # -- Person -------------------------------------------------------------

    def register_form(self) -> Page:
        return self._register_page(None, {})

    def register(self, form: FormSource) -> Page | Redirect:
        try:
            bound = bind_to(form, Person)
        except BindingError as exc:
            # Re-render with every value that did bind.
            draft = bind_to(_bound_pairs(form, exc.errors), Person)
            return self._register_page(replace(draft, addresses=[]), exc.errors, status=422)

        # Identity and addresses never come from the registration form.
        person = replace(bound, id=uuid4(), addresses=[])
        match self.validator.validate(person):
            case Valid(value=valid):
                saved = self.repository.save(valid)
                logger.info("Registered person %s", saved.id)
                return Redirect(f"/person/{saved.id}/address/add")
            case Invalid(violations=violations):
                return self._register_page(person, violations, status=422)

    def view_person(self, person_id: UUID | str) -> Page | Redirect:
        person = self._find(person_id)
        if person is None:
            return Redirect(REGISTER_URL)
        return self._page("view_person.html", person=person)

    def complete(self, person_id: UUID | str) -> Page | Redirect:
        person = self._find(person_id)
        if person is None:
            return Redirect(REGISTER_URL)
        if not person.addresses:
            violations = {"addresses": ["At least one address is required"]}
            return self._add_address_page(person, Address(), violations, status=422)
        return Redirect(f"/person/{person.id}")

    # -- Addresses ----------------------------------------------------------

    def add_address_form(self, person_id: UUID | str) -> Page | Redirect:
        person = self._find(person_id)
        if person is None:
            return Redirect(REGISTER_URL)
        return self._add_address_page(person, Address(), {})

    def add_address(self, person_id: UUID | str, form: FormSource) -> Page | Redirect:
        person = self._find(person_id)
        if person is None:
            return Redirect(REGISTER_URL)

        index = len(person.addresses)
        try:
            bound = bind_indexed_property(form, Address, ADDRESSES.name, index)
        except BindingError as exc:
            draft = bind_indexed_property(
                _bound_pairs(form, exc.errors), Address, ADDRESSES.name, index
            )
            return self._add_address_page(
                person, replace(draft, id=None), exc.errors, status=422
            )

        address = replace(bound, id=None)
        match self.validator.validate(address, prefix=f"{ADDRESSES.name}[{index}]"):
            case Valid(value=valid):
                self.repository.save(replace(person, addresses=[*person.addresses, valid]))
                return Redirect(f"/person/{person.id}/address/add")
            case Invalid(violations=violations):
                return self._add_address_page(person, address, violations, status=422)

    def edit_address_form(
        self, person_id: UUID | str, address_id: UUID | str
    ) -> Page | Redirect:
        person = self._find(person_id)
        if person is None:
            return Redirect(REGISTER_URL)
        index = _index_of(person, address_id)
        if index is None:
            return Redirect(f"/person/{person.id}/address/add")
        return self._edit_address_page(person, index, {})

    def update_address(
        self, person_id: UUID | str, address_id: UUID | str, form: FormSource
    ) -> Page | Redirect:
        person = self._find(person_id)
        if person is None:
            return Redirect(REGISTER_URL)
        index = _index_of(person, address_id)
        if index is None:
            return Redirect(f"/person/{person.id}/address/add")

        stored_id = person.addresses[index].id
        try:
            bound = bind_indexed_property(form, Address, ADDRESSES.name, index)
        except BindingError as exc:
            draft = bind_indexed_property(
                _bound_pairs(form, exc.errors), Address, ADDRESSES.name, index
            )
            draft_person = _with_address(person, index, replace(draft, id=stored_id))
            return self._edit_address_page(draft_person, index, exc.errors, status=422)

        address = replace(bound, id=stored_id)
        updated = _with_address(person, index, address)

        match self.validator.validate(address, prefix=f"{ADDRESSES.name}[{index}]"):
            case Valid():
                self.repository.save(updated)
                return Redirect(f"/person/{person.id}/address/add")
            case Invalid(violations=violations):
                return self._edit_address_page(updated, index, violations, status=422)

    # -- Rendering ----------------------------------------------------------

    def _page(self, template: str, status: int = 200, **context: object) -> Page:
        return Page(self.env.get_template(template).render(context), status)

    def _register_page(
        self, person: Person | None, violations: dict[str, list[str]], status: int = 200
    ) -> Page:
        return self._page(
            "register.html",
            status,
            form=FormBuilder(person, violations),
            paths={"firstName": FIRST_NAME, "lastName": LAST_NAME, "email": EMAIL},
        )

    def _add_address_page(
        self,
        person: Person,
        new_address: Address,
        violations: dict[str, list[str]],
        status: int = 200,
    ) -> Page:
        # The new address is rendered as the element after the stored ones.
        draft = replace(person, addresses=[*person.addresses, new_address])
        return self._page(
            "add_address.html",
            status,
            person=person,
            address=IndexedFormBuilder(draft, violations, ADDRESSES, len(person.addresses)),
        )

    def _edit_address_page(
        self,
        person: Person,
        index: int,
        violations: dict[str, list[str]],
        status: int = 200,
    ) -> Page:
        return self._page(
            "edit_address.html",
            status,
            person=person,
            address_id=person.addresses[index].id,
            address=IndexedFormBuilder(person, violations, ADDRESSES, index),
        )

    def _find(self, person_id: UUID | str) -> Person | None:
        key = _as_uuid(person_id)
        if key is None:
            return None
        return self.repository.find_by_id(key)


def _as_uuid(value: UUID | str) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except ValueError:
        return None


def _index_of(person: Person, address_id: UUID | str) -> int | None:
    key = _as_uuid(address_id)
    for i, address in enumerate(person.addresses):
        if key is not None and address.id == key:
            return i
    return None


def _bound_pairs(form: FormSource, errors: dict[str, list[str]]) -> list[tuple[str, str]]:
    """The submitted pairs whose keys bound without error."""
    return [(key, value) for key, value in iter_pairs(form) if key not in errors]


def _with_address(person: Person, index: int, address: Address) -> Person:
    addresses = list(person.addresses)
    addresses[index] = address
    return replace(person, addresses=addresses)


app = RegistrationApp()
