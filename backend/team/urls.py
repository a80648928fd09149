from django.urls import path
from .views import (
    job_role_list_create, job_role_detail, job_role_seed_defaults,
    team_member_list_create, team_member_detail, team_member_status,
    team_member_regenerate_token, public_team_onboarding,
    salary_list_create, salary_detail, salary_mark_paid
)

urlpatterns = [
    path('job-roles/', job_role_list_create, name='job-role-list-create'),
    path('job-roles/seed-defaults/', job_role_seed_defaults, name='job-role-seed-defaults'),
    path('job-roles/<int:pk>/', job_role_detail, name='job-role-detail'),

    path('team-members/', team_member_list_create, name='team-member-list-create'),
    path('team-members/<int:pk>/', team_member_detail, name='team-member-detail'),
    path('team-members/<int:pk>/status/', team_member_status, name='team-member-status'),
    path('team-members/<int:pk>/onboarding-token/', team_member_regenerate_token, name='team-member-onboarding-token'),
    path('public/team-onboarding/<str:token>/', public_team_onboarding, name='public-team-onboarding'),

    path('salaries/', salary_list_create, name='salary-list-create'),
    path('salaries/<int:pk>/', salary_detail, name='salary-detail'),
    path('salaries/<int:pk>/mark-paid/', salary_mark_paid, name='salary-mark-paid'),
]
