"""値オブジェクト"""
from invoicing.domain.value_objects.actor import ActorContext, Role
from invoicing.domain.value_objects.calculation import CalculatedItem, InvoiceCalculation, TaxBreakdown
from invoicing.domain.value_objects.invoice_number import InvoiceNumber
from invoicing.domain.value_objects.invoice_status import InvoiceAction, InvoiceStatus
from invoicing.domain.value_objects.line_item import LineItem
from invoicing.domain.value_objects.snapshots import CompanySnapshot, FreelancerSnapshot
from invoicing.domain.value_objects.tax_type import TaxType

__all__ = [
    "ActorContext",
    "Role",
    "CalculatedItem",
    "InvoiceCalculation",
    "TaxBreakdown",
    "InvoiceNumber",
    "InvoiceAction",
    "InvoiceStatus",
    "LineItem",
    "CompanySnapshot",
    "FreelancerSnapshot",
    "TaxType",
]
