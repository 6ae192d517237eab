"""
Raffle Desk Use Cases

Business logic grouped by domain:
- auth: registration, login, password recovery
- access: authorization of protected actions
- staff: admin decisions on staff accounts
- tickets: ticket listing, search and sales
"""
