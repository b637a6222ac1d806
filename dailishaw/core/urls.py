from django.urls import path
from .views import (
    LoginView, SessionRefreshView, logout, user_me,
    user_list_create, active_user_list, user_detail,
    share_credentials, reset_password,
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', LoginView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', SessionRefreshView.as_view(), name='token_refresh'),
    path('auth/logout/', logout, name='logout'),
    path('auth/me/', user_me, name='user-me'),

    # Field user administration
    path('dashboard/users/', user_list_create, name='user-list-create'),
    path('dashboard/users/active/', active_user_list, name='user-active-list'),
    path('dashboard/users/share/', share_credentials, name='user-share-credentials'),
    path('dashboard/users/<int:pk>/', user_detail, name='user-detail'),
    path('dashboard/users/<int:pk>/password/', reset_password, name='user-reset-password'),
]
