from django.urls import path
from . import views

app_name = 'conversations'

urlpatterns = [
    path('', views.ConversationListCreateView.as_view(), name='conversation-list'),
    path('<str:conversation_id>/messages/', views.ConversationMessagesView.as_view(), name='conversation-messages'),
    path('<str:conversation_id>/messages', views.ConversationMessagesView.as_view()),
]
