# Employees module
