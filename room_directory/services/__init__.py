# room_directory/services/__init__.py
