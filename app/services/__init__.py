"""
Сервисный слой приложения переаттестации
Работа с базой данных для прохождения теста, каталога вопросов и истории
"""
