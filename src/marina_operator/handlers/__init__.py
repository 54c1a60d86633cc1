"""
Handlers package - Contains all Kopf event handlers for Marina resources.

This package organizes handlers by resource type:
- terminal.py: Terminal resources and their Deployments/Services
- user.py: User resources and their ServiceAccounts/RoleBindings
"""
