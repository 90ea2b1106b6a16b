"""URL configuration for accounts app."""

from django.urls import path

from server.apps.accounts import views

app_name = 'accounts'

urlpatterns = [
    path('auth/login/', views.LoginView.as_view(), name='login'),
    path('auth/refresh/', views.RefreshView.as_view(), name='refresh'),
    path('auth/logout/', views.LogoutView.as_view(), name='logout'),
    path('preferences/', views.PreferencesView.as_view(), name='preferences'),
]
