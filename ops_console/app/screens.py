"""Declarative listing screens: what each one fetches, shows and filters on."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date

from ops_console.app.ui.accessors import FieldRegistry, FieldSpec, Record, first_present, is_blank
from ops_console.app.ui.filters import LocationRule
from ops_console.app.ui.listing_view import Column


@dataclass(frozen=True)
class ScreenConfig:
    name: str
    title: str
    resource: str
    columns: tuple[Column, ...]
    fields: tuple[FieldSpec, ...] = ()
    search_fields: tuple[str, ...] = ()
    location: LocationRule | None = field(default_factory=LocationRule)

    def build_registry(self, currency_symbol: str = "₱", today: Callable[[], date] | None = None) -> FieldRegistry:
        return FieldRegistry(self.fields, currency_symbol=currency_symbol, today=today)


def full_name(*parts: Sequence[str]) -> Callable[[Record], str]:
    """Join name parts, each given as a tuple of alternate spellings."""

    def derive(record: Record) -> str:
        values = [first_present(record, names) for names in parts]
        return " ".join(str(value).strip() for value in values if not is_blank(value))

    return derive


def _columns(*pairs: tuple[str, str]) -> tuple[Column, ...]:
    return tuple(Column(key=key, label=label) for key, label in pairs)


APPLICATIONS = ScreenConfig(
    name="applicationManagement",
    title="Applications",
    resource="/applications",
    columns=_columns(
        ("timestamp", "Timestamp"),
        ("customerName", "Customer Name"),
        ("emailAddress", "Email Address"),
        ("mobileNumber", "Mobile Number"),
        ("installationAddress", "Installation Address"),
        ("city", "City"),
        ("barangay", "Barangay"),
        ("desiredPlan", "Desired Plan"),
        ("referredBy", "Referred By"),
        ("status", "Status"),
    ),
    fields=(
        FieldSpec("timestamp", ("timestamp", "create_date"), kind="datetime"),
        FieldSpec(
            "customerName",
            derive=full_name(("first_name", "firstName"), ("middle_initial", "middleInitial"), ("last_name", "lastName")),
        ),
        FieldSpec("emailAddress", ("email_address", "emailAddress")),
        FieldSpec("mobileNumber", ("mobile_number", "mobileNumber")),
        FieldSpec("installationAddress", ("installation_address", "address_line", "address")),
        FieldSpec("desiredPlan", ("desired_plan", "desiredPlan")),
        FieldSpec("referredBy", ("referred_by", "referredBy")),
    ),
    search_fields=("customerName", "emailAddress", "mobileNumber", "installationAddress", "status"),
)

APPLICATION_VISITS = ScreenConfig(
    name="applicationVisit",
    title="Application Visits",
    resource="/application-visits",
    columns=_columns(
        ("timestamp", "Timestamp"),
        ("full_name", "Full Name"),
        ("visit_status", "Visit Status"),
        ("application_status", "App Status"),
        ("full_address", "Address"),
        ("assigned_email", "Assigned Email"),
    ),
    fields=(
        FieldSpec("timestamp", ("timestamp", "created_at"), kind="datetime"),
        FieldSpec("full_name", ("full_name", "fullName")),
        FieldSpec("visit_status", ("visit_status", "visitStatus")),
        FieldSpec("application_status", ("application_status", "applicationStatus")),
        FieldSpec("full_address", ("full_address", "fullAddress", "address")),
        FieldSpec("assigned_email", ("assigned_email", "assignedEmail")),
    ),
    search_fields=("full_name", "full_address", "assigned_email"),
    location=LocationRule(field=None, address_field="full_address", match="contains"),
)

JOB_ORDERS = ScreenConfig(
    name="jobOrder",
    title="Job Orders",
    resource="/job-orders",
    columns=_columns(
        ("id", "ID (Default)"),
        ("Timestamp", "Date Created"),
        ("Date_Installed", "Date Installed"),
        ("Full_Name", "Client Name"),
        ("Onsite_Status", "Status"),
        ("Billing_Day", "Billing Day"),
        ("Installation_Fee", "Installation Fee"),
        ("Address", "Address"),
        ("City", "City"),
    ),
    fields=(
        FieldSpec("Timestamp", ("Timestamp", "timestamp", "created_at"), kind="datetime"),
        FieldSpec("Date_Installed", ("Date_Installed", "date_installed"), kind="date"),
        FieldSpec(
            "Full_Name",
            derive=full_name(
                ("First_Name", "first_name"),
                ("Middle_Initial", "middle_initial"),
                ("Last_Name", "last_name"),
            ),
        ),
        FieldSpec("Onsite_Status", ("Onsite_Status", "onsite_status")),
        FieldSpec("Billing_Day", ("Billing_Day", "billing_day"), kind="billing_day"),
        FieldSpec("Installation_Fee", ("Installation_Fee", "installation_fee"), kind="currency"),
        FieldSpec("Address", ("Address", "address")),
        FieldSpec("City", ("City", "city")),
    ),
    search_fields=("Full_Name", "id", "Address"),
    location=LocationRule(field="City", match="contains"),
)

CUSTOMERS = ScreenConfig(
    name="customer",
    title="Customers",
    resource="/billing",
    columns=_columns(
        ("status", "Status"),
        ("billingStatus", "Billing Status"),
        ("accountNo", "Account No."),
        ("dateInstalled", "Date Installed"),
        ("customerName", "Full Name"),
        ("address", "Address"),
        ("contactNumber", "Contact Number"),
        ("plan", "Plan"),
        ("balance", "Account Balance"),
        ("billingDay", "Billing Day"),
        ("totalPaid", "Total Paid"),
        ("applicationId", "Application ID"),
        ("city", "City"),
    ),
    fields=(
        FieldSpec("billingStatus", ("billing_status", "billingStatus")),
        FieldSpec("accountNo", ("account_no", "accountNo")),
        FieldSpec("dateInstalled", ("date_installed", "dateInstalled"), kind="date"),
        FieldSpec("customerName", ("full_name", "customerName", "customer_name")),
        FieldSpec("contactNumber", ("contact_number", "contactNumber")),
        FieldSpec("plan", ("plan", "plan_name", "desired_plan")),
        FieldSpec("balance", ("account_balance", "balance"), kind="currency"),
        FieldSpec("billingDay", ("billing_day", "billingDay"), kind="billing_day"),
        FieldSpec("totalPaid", ("total_paid", "totalPaid"), kind="currency"),
        FieldSpec("applicationId", ("application_id", "applicationId")),
    ),
    search_fields=("customerName", "address", "applicationId"),
)

INVOICES = ScreenConfig(
    name="invoice",
    title="Invoices",
    resource="/billing-generation/invoices",
    columns=_columns(
        ("id", "ID"),
        ("accountNo", "Account No."),
        ("fullName", "Full Name"),
        ("invoiceDate", "Invoice Date"),
        ("dueDate", "Due Date"),
        ("totalAmount", "Total Amount"),
        ("receivedPayment", "Received Payment"),
        ("status", "Status"),
        ("city", "City"),
    ),
    fields=(
        FieldSpec("accountNo", ("account_no", "accountNo", "account.account_no")),
        FieldSpec("fullName", ("full_name", "fullName", "account.customer.full_name")),
        FieldSpec("invoiceDate", ("invoice_date", "invoiceDate"), kind="date"),
        FieldSpec("dueDate", ("due_date", "dueDate"), kind="date"),
        FieldSpec("totalAmount", ("total_amount", "totalAmount"), kind="currency"),
        FieldSpec("receivedPayment", ("received_payment", "receivedPayment"), kind="currency"),
        FieldSpec("city", ("city", "account.customer.city")),
    ),
    search_fields=("accountNo", "fullName", "id"),
)

STATEMENTS = ScreenConfig(
    name="soa",
    title="Statements of Account",
    resource="/billing-generation/statements",
    columns=_columns(
        ("id", "ID"),
        ("accountNo", "Account Number"),
        ("statementDate", "Statement Date"),
        ("balanceFromPreviousBill", "Balance from Previous Bill"),
        ("monthlyServiceFee", "Monthly Service Fee"),
        ("vat", "VAT"),
        ("dueDate", "Due Date"),
        ("amountDue", "Amount Due"),
        ("totalAmountDue", "Total Amount Due"),
        ("fullName", "Full Name"),
        ("address", "Address"),
        ("city", "City"),
    ),
    fields=(
        FieldSpec("accountNo", ("account_no", "accountNo", "account.account_no")),
        FieldSpec("statementDate", ("statement_date", "statementDate"), kind="date"),
        FieldSpec("balanceFromPreviousBill", ("balance_from_previous_bill", "balanceFromPreviousBill"), kind="currency"),
        FieldSpec("monthlyServiceFee", ("monthly_service_fee", "monthlyServiceFee"), kind="currency"),
        FieldSpec("vat", ("vat",), kind="currency"),
        FieldSpec("dueDate", ("due_date", "dueDate"), kind="date"),
        FieldSpec("amountDue", ("amount_due", "amountDue"), kind="currency"),
        FieldSpec("totalAmountDue", ("total_amount_due", "totalAmountDue"), kind="currency"),
        FieldSpec("fullName", ("full_name", "fullName", "account.customer.full_name")),
        FieldSpec("address", ("address", "full_address", "account.customer.address")),
        FieldSpec("city", ("city", "account.customer.city")),
    ),
    search_fields=("fullName", "address", "accountNo", "id"),
)

SERVICE_ORDERS = ScreenConfig(
    name="serviceOrder",
    title="Service Orders",
    resource="/service-orders",
    columns=_columns(
        ("timestamp", "Timestamp"),
        ("fullName", "Full Name"),
        ("contactNumber", "Contact Number"),
        ("fullAddress", "Full Address"),
        ("concern", "Concern"),
        ("supportStatus", "Support Status"),
        ("assignedEmail", "Assigned Email"),
        ("visitStatus", "Visit Status"),
        ("modifiedDate", "Modified Date"),
    ),
    fields=(
        FieldSpec("timestamp", ("timestamp", "created_at"), kind="datetime"),
        FieldSpec("fullName", ("full_name", "fullName")),
        FieldSpec("contactNumber", ("contact_number", "contactNumber")),
        FieldSpec("fullAddress", ("full_address", "fullAddress")),
        FieldSpec("supportStatus", ("support_status", "supportStatus")),
        FieldSpec("assignedEmail", ("assigned_email", "assignedEmail")),
        FieldSpec("visitStatus", ("visit_status", "visitStatus")),
        FieldSpec("modifiedDate", ("modified_date", "modifiedDate", "updated_at"), kind="datetime"),
    ),
    search_fields=("fullName", "contactNumber", "fullAddress", "concern"),
    location=LocationRule(field=None, address_field="fullAddress", match="contains"),
)

TRANSACTIONS = ScreenConfig(
    name="transactionList",
    title="Transactions",
    resource="/transactions",
    columns=_columns(
        ("id", "ID"),
        ("date_processed", "Date Processed"),
        ("account_no", "Account No."),
        ("full_name", "Full Name"),
        ("received_payment", "Received Payment"),
        ("payment_method", "Payment Method"),
        ("reference_no", "Reference No."),
        ("status", "Status"),
        ("city", "City"),
    ),
    fields=(
        FieldSpec("date_processed", ("date_processed", "created_at"), kind="datetime"),
        FieldSpec("account_no", ("account.account_no", "account_no")),
        FieldSpec("full_name", ("account.customer.full_name", "full_name")),
        FieldSpec("received_payment", ("received_payment", "amount"), kind="currency"),
        FieldSpec("city", ("account.customer.city", "city")),
    ),
    search_fields=("full_name", "account_no", "reference_no"),
)

LOCATIONS = ScreenConfig(
    name="locationList",
    title="Locations",
    resource="/locations",
    columns=_columns(
        ("id", "ID"),
        ("name", "Name"),
        ("type", "Type"),
        ("parentName", "Parent"),
        ("region", "Region"),
    ),
    fields=(
        FieldSpec("parentName", ("parent_name", "parentName", "city_name")),
        FieldSpec("region", ("region_name", "region")),
    ),
    search_fields=("name", "type", "parentName"),
    location=None,
)

SCREENS: dict[str, ScreenConfig] = {
    "applications": APPLICATIONS,
    "application_visits": APPLICATION_VISITS,
    "job_orders": JOB_ORDERS,
    "customers": CUSTOMERS,
    "invoices": INVOICES,
    "statements": STATEMENTS,
    "service_orders": SERVICE_ORDERS,
    "transactions": TRANSACTIONS,
    "locations": LOCATIONS,
}


def get_screen(slug: str) -> ScreenConfig:
    try:
        return SCREENS[slug]
    except KeyError as error:
        raise KeyError(f"Unknown screen '{slug}'. Available: {', '.join(SCREENS)}") from error
