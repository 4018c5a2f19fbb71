from django.contrib import admin

from . import models


class BatchSessionInline(admin.TabularInline):
    model = models.BatchSession
    extra = 0
    fields = ('date', 'start_time', 'end_time', 'status', 'notes')


class BatchAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'type', 'status', 'start_date', 'end_date', 'schedule_pattern', 'no_of_sessions')
    list_filter = ('type', 'status')
    search_fields = ('name',)
    filter_horizontal = ('members', 'partners')
    inlines = (BatchSessionInline,)


class BatchSessionAdmin(admin.ModelAdmin):
    list_display = ('id', 'batch', 'date', 'start_time', 'end_time', 'status')
    list_filter = ('status',)
    search_fields = ('batch__name',)
    date_hierarchy = 'date'


admin.site.register(models.Batch, BatchAdmin)
admin.site.register(models.BatchSession, BatchSessionAdmin)
