# config/urls.py

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # Aplicações principais
    path('', include('apps.core.urls')),
    path('board/', include('apps.board.urls')),
    path('relatorios/', include('apps.relatorios.urls')),
]

# Customizar títulos do admin
admin.site.site_header = 'Quadro Board Admin'
admin.site.site_title = 'Quadro Board'
admin.site.index_title = 'Administração do Sistema'
