import uuid

from django.conf import settings
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

JOIN_CODE_REGEX = r'^[0-9]{6}$'


class Quiz(models.Model):
    """
    A multiple-choice quiz authored by an admin.

    Fields:
    - id: UUID primary key; its shape is what tells ids and join codes apart.
    - owner: admin who created the quiz (foreign key to AUTH_USER_MODEL).
    - title / description: human-facing text.
    - join_code: 6-digit numeric alternate key, unique and never changed after creation.
    - time_limit_minutes: optional whole-quiz time budget.
    - created_at/updated_at: timestamps managed by Django.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='quizzes',    # reverse relation: user.quizzes
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    join_code = models.CharField(
        max_length=6,
        unique=True,               # uniqueness is enforced by the store
        editable=False,
        validators=[RegexValidator(JOIN_CODE_REGEX)],
    )
    time_limit_minutes = models.PositiveIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1)],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']  # newest first
        verbose_name_plural = 'Quizzes'

    def __str__(self) -> str:
        return f'Quiz({self.id}) [{self.join_code}] by User({self.owner_id}): {self.title}'


class Question(models.Model):
    """
    One question of a quiz. Position defines presentation order and is
    what submitted answers are matched against.

    - options: ordered list of strings (the authoring UI uses 4).
    - correct_answer: expected option text; not checked against options.
    """
    quiz = models.ForeignKey(
        'Quiz', on_delete=models.CASCADE, related_name='questions'
    )
    position = models.PositiveIntegerField()
    text = models.CharField(max_length=500)
    options = models.JSONField(default=list)  # e.g. ["A", "B", "C", "D"]
    correct_answer = models.CharField(max_length=500)
    time_limit_seconds = models.PositiveIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1)],
    )

    class Meta:
        ordering = ['position']
        constraints = [
            models.UniqueConstraint(
                fields=['quiz', 'position'],
                name='uq_question_quiz_position',
            )
        ]

    def __str__(self) -> str:
        return f'Question({self.id}) #{self.position} for Quiz({self.quiz_id})'


class Result(models.Model):
    """
    A graded submission. Never updated after creation.

    answers holds snapshots {question, selected, correct} taken at
    submission time so the result stays readable after the quiz changes.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='quiz_results',
    )
    quiz = models.ForeignKey(
        'Quiz', on_delete=models.CASCADE, related_name='results'
    )
    answers = models.JSONField(default=list)
    score = models.PositiveIntegerField()
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-submitted_at']
        indexes = [
            models.Index(fields=['quiz', '-score', 'submitted_at'], name='ix_result_leaderboard'),
        ]

    def __str__(self) -> str:
        return f'Result({self.id}) User({self.user_id}) Quiz({self.quiz_id}): {self.score}'
