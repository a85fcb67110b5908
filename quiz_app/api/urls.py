from django.urls import path
from quiz_app.api.views import (
    LeaderboardView,
    QuizDetailView,
    QuizListCreateView,
    QuizSubmitView,
    ResultListView,
)


urlpatterns = [
    path('quizzes/', QuizListCreateView.as_view(), name='quiz-list'),
    path('quizzes/results/', ResultListView.as_view(), name='quiz-results'),
    path('quizzes/leaderboard/<str:quiz_id>/', LeaderboardView.as_view(), name='quiz-leaderboard'),
    path('quizzes/<str:identifier>/', QuizDetailView.as_view(), name='quiz-detail'),
    path('quizzes/<str:identifier>/submit/', QuizSubmitView.as_view(), name='quiz-submit'),
]
