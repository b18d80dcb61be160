"""
Инициализация маршрутов приложения
Объединение всех модулей маршрутов в одном месте
"""

# Определение всех blueprints
__all__ = ['auth_bp', 'main_bp', 'attestation_bp', 'history_bp', 'catalog_bp', 'admin_bp']
