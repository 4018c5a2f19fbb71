from django.contrib import admin

from . import models


class ActionLogAdmin(admin.ModelAdmin):
    list_display = ('id', 'action', 'user', 'target', 'category', 'entity_type', 'entity_id', 'created_at')
    list_filter = ('category', 'action')
    search_fields = ('action', 'user', 'target', 'details')
    date_hierarchy = 'created_at'
    readonly_fields = (
        'action', 'user', 'target', 'category', 'details', 'ip_address', 'old_values', 'new_values',
        'performed_by', 'entity_type', 'entity_id', 'created_at',
    )


admin.site.register(models.ActionLog, ActionLogAdmin)
