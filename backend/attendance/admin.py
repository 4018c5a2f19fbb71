from django.contrib import admin

from . import models


class MemberAttendanceAdmin(admin.ModelAdmin):
    list_display = ('id', 'member', 'batch_session', 'status', 'marked_at', 'marked_by')
    list_filter = ('status',)
    search_fields = ('member__name', 'batch_session__batch__name')
    raw_id_fields = ('batch_session', 'member', 'marked_by')


class PartnerAttendanceAdmin(admin.ModelAdmin):
    list_display = ('id', 'partner', 'batch_session', 'status', 'marked_at', 'marked_by')
    list_filter = ('status',)
    search_fields = ('partner__name', 'batch_session__batch__name')
    raw_id_fields = ('batch_session', 'partner', 'marked_by')


admin.site.register(models.MemberAttendance, MemberAttendanceAdmin)
admin.site.register(models.PartnerAttendance, PartnerAttendanceAdmin)
