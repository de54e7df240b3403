# postcraft/services/__init__.py
