"""Domain packages: schemas, lifecycle rules, repository, service and router per area"""
