"""src/idleconn/utils/__init__.py"""
