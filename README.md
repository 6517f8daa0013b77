# gethacked

The core of a security services portal. Organisations request penetration
tests and answer offers, platform admins send offers, assign pentesters and
move engagements through their workflow, and pentesters record findings.
Everything is stored in SQLite through the standard `sqlite3` module; the
package has no third-party dependencies.

## Modules

- `gethacked.errors` — `PortalError` and its subclasses `NotFoundError`
  (status 404), `BadRequestError` (400) and `UnauthorizedError` (401). Each
  carries a `status` and a `message`.
- `gethacked.migration` — `Migration` (a name with statements to apply and
  revert) and `Migrator`, which runs migrations in order and records them in
  a `seaql_migrations` ledger table. `Migrator` offers `applied(conn)`,
  `pending(conn)`, `up(conn)` and `down(conn, steps=1)`.
- `gethacked.catalog_offerings`, `gethacked.catalog_engagements`,
  `gethacked.catalog_results` — one function per migration, creating the
  tables for services, pricing tiers, subscriptions, scan targets,
  engagements, engagement offers, pentester assignments, scan jobs,
  findings, reports and invoices, plus `seed_admin_org_migration()`, which
  inserts the platform admin organisation (slug `gethacked-admin`) unless it
  already exists.
- `gethacked.registry` — `app_migrations()` lists those migrations in order;
  `build_migrator(core=())` returns a `Migrator` that runs the given `core`
  migrations first.
- `gethacked.seed` — `seed(conn)` inserts the four standard services and
  their pricing tiers when the `services` table is empty, returning `True`
  if it inserted anything. `truncate(conn)` deletes all rows from the
  portal's tables, children first, skipping tables that do not exist, and
  returns the names of the tables it emptied.
- `gethacked.validation` — `is_valid_domain` for free-scan domains;
  `validate_hostname`, `validate_ip_address` and `validate_target` for scan
  targets. They reject reserved names and suffixes, private, loopback,
  link-local, broadcast, CGNAT and IPv6 unique-local addresses, raising
  `BadRequestError`.
- `gethacked.engagements` — `OrgRole` (viewer < member < admin < owner),
  `require_role`, `EngagementRequest` and `EngagementStore` with
  `request`, `list_for_org`, `get`, `offers` and `respond` (action
  `"accept"` or `"negotiate"`; needs the admin role).
- `gethacked.admin` — `is_valid_transition`, `OfferParams` and
  `AdminEngagements` with `pending`, `all`, `show`, `create_offer`,
  `assign_pentester` and `update_status`.
- `gethacked.pentester` — `validate_severity`, `FindingParams` and
  `PentesterWorkspace` with `engagements`, `show`, `get_finding`,
  `add_finding` and `update_finding`. Engagements the pentester is not
  assigned to raise `NotFoundError`, as missing ones do.
- `gethacked.contact` — `ContactForm` (built with `ContactForm.from_mapping`),
  `ContactMessage`, `contact_recipient`, `compose_message` and `submit`,
  which passes the message to a mailer callable if one is given and
  otherwise only logs it.
- `gethacked.headers` — `security_headers()` returns the response headers the
  portal sets; `SecurityHeadersMiddleware` wraps a WSGI application and sets
  them on every response, replacing any the application set itself.

## Examples

Creating a database:

```python
import sqlite3
from gethacked.registry import build_migrator
from gethacked.seed import seed

conn = sqlite3.connect("portal.db")
migrator = build_migrator(core_migrations)  # migrations creating users, organizations, ...
migrator.up(conn)
seed(conn)
```

Validating scan targets:

```python
from gethacked.errors import BadRequestError
from gethacked.validation import is_valid_domain, validate_hostname, validate_ip_address

is_valid_domain("example.com")      # True
is_valid_domain("printer.local")    # False

validate_hostname(" App.Example.com ")  # "app.example.com"
try:
    validate_ip_address("10.0.0.1")
except BadRequestError as exc:
    print(exc)  # IP address is in a reserved or private range
```

Checking an engagement status change:

```python
from gethacked.admin import is_valid_transition

is_valid_transition("in_progress", "review")   # True
is_valid_transition("delivered", "cancelled")  # False
```

Wrapping a WSGI application:

```python
from gethacked.headers import SecurityHeadersMiddleware

application = SecurityHeadersMiddleware(application)
```

## What this package does not do

- It defines no tables for users, organisations, organisation members or
  invites. Those must come from core migrations passed to `build_migrator`;
  the admin-organisation seed and several foreign keys depend on them.
- It has no web server, routes, templates or page rendering, and no
  sign-in: callers pass in the user id and organisation role themselves.
- It does not send e-mail itself; `contact.submit` only calls the mailer
  it is given.
- It does not run scans, query certificate logs or queue background jobs;
  scan jobs and reports are only tables here.
- It has no command-line entry point.