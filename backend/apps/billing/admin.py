from django.contrib import admin

from .models import Bill, BillLineItem, BillNumberScheme, BusinessSettings


class BillLineItemInline(admin.TabularInline):
    model = BillLineItem
    extra = 0
    can_delete = False
    readonly_fields = ["product", "product_name", "quantity", "unit_price", "total_price", "position"]

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    """Bills are immutable once created; the admin only displays them."""

    list_display = ["bill_number", "customer_name", "total_amount", "payment_method", "payment_status", "created_at"]
    list_filter = ["payment_method", "payment_status", "created_at"]
    search_fields = ["bill_number", "customer_name"]
    date_hierarchy = "created_at"
    inlines = [BillLineItemInline]
    readonly_fields = [
        "bill_number",
        "customer",
        "customer_name",
        "subtotal",
        "tax_rate",
        "tax_amount",
        "discount_amount",
        "total_amount",
        "payment_method",
        "payment_status",
        "notes",
        "created_at",
    ]

    def has_add_permission(self, request):
        return False


@admin.register(BusinessSettings)
class BusinessSettingsAdmin(admin.ModelAdmin):
    list_display = ["name", "currency", "tax_rate", "business_type"]


@admin.register(BillNumberScheme)
class BillNumberSchemeAdmin(admin.ModelAdmin):
    list_display = ["pattern", "next_counter", "reset_period", "last_reset_date"]
