from rest_framework import serializers # DRF serializers base
from auth_app.models import display_name
from quiz_app.models import Quiz, Question, Result # import our ORM models
from quiz_app.services.authoring import UNCHANGED, QuestionData, QuizPatch
from quiz_app.services.grading import AnswerData
from quiz_app.services.results import ResultFilter


class QuestionSerializer(serializers.ModelSerializer):
    """
    Read-only nested serializer for returning question data.
    'correctAnswer' is only included when the context sets reveal_answers.
    """
    correctAnswer = serializers.CharField(source='correct_answer', read_only=True)
    timeLimitSeconds = serializers.IntegerField(source='time_limit_seconds', read_only=True)

    class Meta:
        model = Question # bind to Question model
        fields = ('id', 'position', 'text', 'options', 'correctAnswer', 'timeLimitSeconds')
        read_only_fields = fields # ensure nested output only

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not self.context.get('reveal_answers', False):
            data.pop('correctAnswer', None)
        return data


class UserSummarySerializer(serializers.Serializer):
    """{id, name, email} of a joined user"""
    id = serializers.IntegerField(read_only=True)
    name = serializers.SerializerMethodField()
    email = serializers.EmailField(read_only=True)

    def get_name(self, user) -> str:
        return display_name(user)


class QuizSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for a quiz including nested questions and the owner summary.
    """
    joinCode = serializers.CharField(source='join_code', read_only=True)
    timeLimitMinutes = serializers.IntegerField(source='time_limit_minutes', read_only=True)
    ownerId = serializers.IntegerField(source='owner_id', read_only=True)
    owner = UserSummarySerializer(read_only=True)
    questions = QuestionSerializer(many=True, read_only=True) # include nested questions
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Quiz # bind to Quiz model
        fields = (
            'id', 'title', 'description', 'joinCode', 'timeLimitMinutes',
            'ownerId', 'owner', 'questions', 'createdAt', 'updatedAt',
        )
        read_only_fields = fields # output-only


class QuizSummarySerializer(serializers.ModelSerializer):
    """Quiz fields embedded into results: title, join code and questions"""
    joinCode = serializers.CharField(source='join_code', read_only=True)
    questions = QuestionSerializer(many=True, read_only=True)

    class Meta:
        model = Quiz
        fields = ('id', 'title', 'joinCode', 'questions')
        read_only_fields = fields


class QuestionInputSerializer(serializers.Serializer):
    """One authored question. The correct answer is not checked against the options."""
    text = serializers.CharField(max_length=500)
    options = serializers.ListField(child=serializers.CharField(allow_blank=True, trim_whitespace=False))
    correctAnswer = serializers.CharField(source='correct_answer', max_length=500, trim_whitespace=False)
    timeLimitSeconds = serializers.IntegerField(
        source='time_limit_seconds', min_value=1, required=False, allow_null=True
    )

    @staticmethod
    def to_question(data: dict) -> QuestionData:
        return QuestionData(
            text=data['text'],
            options=list(data['options']),
            correct_answer=data['correct_answer'],
            time_limit_seconds=data.get('time_limit_seconds'),
        )


class QuizCreateSerializer(serializers.Serializer):
    """
    Write-only input serializer for creating a quiz.
    Join code and owner are assigned by the server.
    """
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    questions = QuestionInputSerializer(many=True, required=False)
    timeLimitMinutes = serializers.IntegerField(
        source='time_limit_minutes', min_value=1, required=False, allow_null=True
    )

    def question_data(self):
        return [QuestionInputSerializer.to_question(q) for q in self.validated_data.get('questions', [])]


class QuizUpdateSerializer(QuizCreateSerializer):
    """
    Serializer used for PUT/PATCH updates on a Quiz.
    Every field is optional; keys outside {title, description, questions,
    timeLimitMinutes} (e.g. 'joinCode', 'ownerId') are rejected.
    A null timeLimitMinutes removes the time limit.
    """
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        unknown = sorted(set(self.initial_data) - set(self.fields))
        if unknown:
            raise serializers.ValidationError({key: 'This field cannot be changed.' for key in unknown})
        return attrs

    def to_patch(self) -> QuizPatch:
        data = self.validated_data
        return QuizPatch(
            title=data.get('title'),
            description=data.get('description'),
            questions=self.question_data() if 'questions' in data else None,
            time_limit_minutes=data['time_limit_minutes'] if 'time_limit_minutes' in data else UNCHANGED,
        )


class AnswerInputSerializer(serializers.Serializer):
    """{question, selected, correct} as sent by the quiz page"""
    question = serializers.CharField(required=False, allow_blank=True, default='')
    selected = serializers.CharField(allow_blank=True, allow_null=True, trim_whitespace=False)
    correct = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False, default=None)


class SubmitSerializer(serializers.Serializer):
    answers = AnswerInputSerializer(many=True, required=False)

    def answer_data(self):
        return [AnswerData(**item) for item in self.validated_data.get('answers', [])]


class ResultFilterSerializer(serializers.Serializer):
    """Query parameters of the results list"""
    quizId = serializers.UUIDField(source='quiz_id', required=False)
    userId = serializers.IntegerField(source='user_id', required=False)
    minScore = serializers.IntegerField(source='min_score', min_value=0, required=False)
    maxScore = serializers.IntegerField(source='max_score', min_value=0, required=False)
    name = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)

    def to_filter(self) -> ResultFilter:
        return ResultFilter(**self.validated_data)


class LeaderboardQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, required=False)


class ResultSerializer(serializers.ModelSerializer):
    """A result with the joined user {id, name, email} and quiz {id, title, joinCode, questions}"""
    user = UserSummarySerializer(read_only=True)
    quiz = QuizSummarySerializer(read_only=True)
    submittedAt = serializers.DateTimeField(source='submitted_at', read_only=True)

    class Meta:
        model = Result
        fields = ('id', 'user', 'quiz', 'answers', 'score', 'submittedAt')
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # answer snapshots of other users would leak the answer key
        if not self.context.get('reveal_answers', False) and instance.user_id != self.context.get('caller_id'):
            data.pop('answers', None)
        return data
