"""
Page routers for the console.

- auth: login page, sign-in, sign-out
- dashboard: headline metrics
- master_data: customers, employees, parts, machines
- production: job orders and the shop floor board
- challans, billing, attendance, reports
- registers: read-only register pages

Routers are included by shop_erp.api.main.create_app.
"""
