from django.contrib import admin
from .models import Listing


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'owner_id', 'created_at']
    search_fields = ['id', 'title', 'owner_id']
    readonly_fields = ['id', 'created_at']
