"""Services subpackage - jobs, crew, persistence and reports."""
