from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.contrib.auth import get_user_model

from auth_app.models import Profile

User = get_user_model()

# the built-in UserAdmin is replaced so the profile can be edited inline
try:
    admin.site.unregister(User)
except admin.sites.NotRegistered:
    pass


class ProfileInline(admin.StackedInline):
    """Edit name and role on the user page"""
    model = Profile
    can_delete = False
    fields = ('name', 'role')


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """
    Customizes the built-in User admin to show the primary key, display name and role.
    """
    inlines = (ProfileInline,)
    list_display = (
        'id',
        'username',
        'email',
        'profile_name',
        'profile_role',
        'is_active',
        'date_joined',
    )
    search_fields = ('username', 'email', 'profile__name')
    list_filter = ('profile__role', 'is_staff', 'is_active')
    readonly_fields = ('id',)

    @admin.display(description='Name')
    def profile_name(self, obj):
        return getattr(getattr(obj, 'profile', None), 'name', '')

    @admin.display(description='Role')
    def profile_role(self, obj):
        return getattr(getattr(obj, 'profile', None), 'role', '')
