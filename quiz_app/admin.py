from django.contrib import admin
from .models import Quiz, Question, Result


class QuestionInline(admin.TabularInline):
    """Questions are edited in place, ordered by position"""
    model = Question
    extra = 0
    fields = ('position', 'text', 'options', 'correct_answer', 'time_limit_seconds')


@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    """
    Admin config for Quiz to surface ID, join code, owner, and basic metadata.
    """
    inlines = (QuestionInline,)
    list_display = ('id', 'join_code', 'owner', 'title', 'time_limit_minutes', 'created_at')  # show key columns
    search_fields = ('title', 'description', 'join_code', 'owner__username', 'owner__email')
    list_filter = ('created_at',)
    readonly_fields = ('id', 'join_code', 'created_at', 'updated_at')


@admin.register(Result)
class ResultAdmin(admin.ModelAdmin):
    """
    Results are read-only; they only disappear together with their quiz.
    """
    list_display = ('id', 'quiz', 'user', 'score', 'submitted_at')
    search_fields = ('quiz__title', 'quiz__join_code', 'user__username', 'user__email')
    list_filter = ('submitted_at',)
    readonly_fields = ('id', 'user', 'quiz', 'answers', 'score', 'submitted_at')

    def has_add_permission(self, request):
        return False
