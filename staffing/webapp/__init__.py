"""FastAPI front end over StaffingDataService."""
