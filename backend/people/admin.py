from django.contrib import admin

from . import models


class PersonAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'email', 'status', 'excused_until', 'excuse_reason')
    list_filter = ('status',)
    search_fields = ('name', 'email', 'phone')


class PartnerAdmin(PersonAdmin):
    list_display = PersonAdmin.list_display + ('specialization',)


admin.site.register(models.Member, PersonAdmin)
admin.site.register(models.Partner, PartnerAdmin)
