"""
URL configuration for the marketplace inbox project.
"""
from django.contrib import admin
from django.urls import path, include
from conversations.views import ConversationListCreateView
from . import views

# Base URL patterns without prefix
base_urlpatterns = [
    path('ping/', views.PingView.as_view(), name='ping'),
    path('conversations/', include('conversations.urls')),
    # Also served without the trailing slash
    path('conversations', ConversationListCreateView.as_view()),
]

urlpatterns = [
    path('admin/', admin.site.urls),
    # Same routes under the /api/ prefix used by the web frontend
    path('api/', include((base_urlpatterns, 'api'))),
]

urlpatterns += base_urlpatterns
