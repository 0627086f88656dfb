"""Canonical example data written into each collection the first time it is observed empty.

Each seed takes the current epoch milliseconds so relative timestamps
("2.5 hours ago") are stamped once, at seeding time.
"""

from __future__ import annotations

from organizeit.clock import HOUR_MS, MINUTE_MS, iso_from_ms


def seed_alerts(now: int) -> list[dict]:
    return [
        {
            "id": f"ALT-{now}-001",
            "severity": "High",
            "title": "Database Connection Pool Exhaustion",
            "description": "Payment processing database showing connection pool exhaustion. Response times increased by 300%.",
            "service": "Payment API",
            "timestamp": iso_from_ms(now - 2.5 * HOUR_MS),
            "status": "Active",
            "impact": "Payment processing delays",
            "assignee": "john.doe@company.com",
            "environment": "Production",
        },
        {
            "id": f"ALT-{now}-002",
            "severity": "Medium",
            "title": "Memory Usage Threshold Exceeded",
            "description": "Web frontend instances consistently above 85% memory utilization.",
            "service": "Web Frontend",
            "timestamp": iso_from_ms(now - 45 * MINUTE_MS),
            "status": "Investigating",
            "impact": "Potential performance degradation",
            "assignee": "sarah.johnson@company.com",
            "environment": "Production",
        },
        {
            "id": f"ALT-{now}-003",
            "severity": "Low",
            "title": "SSL Certificate Expiring Soon",
            "description": "API gateway SSL certificate expires in 14 days.",
            "service": "API Gateway",
            "timestamp": iso_from_ms(now - 6 * HOUR_MS),
            "status": "Acknowledged",
            "impact": "Future service disruption if not renewed",
            "assignee": "mike.chen@company.com",
            "environment": "Production",
        },
    ]


def seed_notifications(now: int) -> list[dict]:
    return [
        {
            "id": "NOT-001",
            "type": "alert",
            "title": "High CPU Usage Detected",
            "message": "Web frontend instances showing sustained high CPU usage above 85% threshold",
            "timestamp": iso_from_ms(now - 30 * MINUTE_MS),
            "read": False,
            "severity": "warning",
            "action_url": "/it-operations?tab=performance",
            "source": "Monitoring System",
        },
        {
            "id": "NOT-002",
            "type": "cost",
            "title": "Monthly Budget Alert",
            "message": "Cloud spending is 15% above projected budget for this month ($285K vs $248K planned)",
            "timestamp": iso_from_ms(now - 2 * HOUR_MS),
            "read": False,
            "severity": "warning",
            "action_url": "/finops?tab=budget",
            "source": "FinOps Analytics",
        },
        {
            "id": "NOT-003",
            "type": "security",
            "title": "Security Patch Available",
            "message": "Critical security patches available for 12 production instances - CVE-2024-1234",
            "timestamp": iso_from_ms(now - 4 * HOUR_MS),
            "read": True,
            "severity": "high",
            "action_url": "/audit?tab=compliance",
            "source": "Security Scanner",
        },
        {
            "id": "NOT-004",
            "type": "esg",
            "title": "Carbon Footprint Reduction",
            "message": "Monthly carbon emissions reduced by 12% through optimization initiatives",
            "timestamp": iso_from_ms(now - 6 * HOUR_MS),
            "read": False,
            "severity": "info",
            "action_url": "/esg?tab=carbon",
            "source": "ESG Monitoring",
        },
        {
            "id": "NOT-005",
            "type": "ai",
            "title": "Cost Optimization Opportunity",
            "message": "AI analysis identified $79,500/month potential savings from right-sizing instances",
            "timestamp": iso_from_ms(now - 8 * HOUR_MS),
            "read": False,
            "severity": "info",
            "action_url": "/ai-insights?tab=cost",
            "source": "AI Analytics Engine",
        },
        {
            "id": "NOT-006",
            "type": "system",
            "title": "Database Performance Alert",
            "message": "Payment processing database showing connection pool exhaustion",
            "timestamp": iso_from_ms(now - 12 * HOUR_MS),
            "read": True,
            "severity": "critical",
            "action_url": "/it-operations?tab=incidents",
            "source": "Database Monitor",
        },
    ]


def seed_projects(now: int) -> list[dict]:
    return [
        {
            "id": "PROJ-001",
            "name": "Cloud Migration Phase 2",
            "description": "Migrate remaining on-premise workloads to hybrid cloud",
            "status": "In Progress",
            "priority": "High",
            "progress": 67,
            "budget": 250000,
            "spent": 165000,
            "team_size": 8,
            "start_date": "2024-01-15",
            "end_date": "2024-06-30",
            "lead": "Sarah Johnson",
            "category": "Infrastructure",
        },
        {
            "id": "PROJ-002",
            "name": "Security Compliance Upgrade",
            "description": "Implement SOC2 Type II compliance across all systems",
            "status": "Planning",
            "priority": "High",
            "progress": 23,
            "budget": 180000,
            "spent": 42000,
            "team_size": 5,
            "start_date": "2024-02-01",
            "end_date": "2024-08-15",
            "lead": "Mike Chen",
            "category": "Security",
        },
        {
            "id": "PROJ-003",
            "name": "AI-Powered Monitoring",
            "description": "Deploy machine learning models for predictive monitoring",
            "status": "In Progress",
            "priority": "Medium",
            "progress": 45,
            "budget": 120000,
            "spent": 54000,
            "team_size": 4,
            "start_date": "2024-03-01",
            "end_date": "2024-07-31",
            "lead": "David Kim",
            "category": "Innovation",
        },
    ]


def seed_services(now: int) -> list[dict]:
    return [
        {
            "id": "SVC-001",
            "name": "Web Frontend",
            "status": "healthy",
            "uptime": 99.98,
            "response_time": 245,
            "last_incident": "2024-01-15T10:30:00Z",
            "environment": "Production",
        },
        {
            "id": "SVC-002",
            "name": "User API",
            "status": "healthy",
            "uptime": 99.95,
            "response_time": 189,
            "last_incident": "2024-01-12T14:20:00Z",
            "environment": "Production",
        },
        {
            "id": "SVC-003",
            "name": "Payment API",
            "status": "degraded",
            "uptime": 98.2,
            "response_time": 1200,
            "last_incident": iso_from_ms(now - 2 * HOUR_MS),
            "environment": "Production",
        },
        {
            "id": "SVC-004",
            "name": "Database Cluster",
            "status": "healthy",
            "uptime": 99.99,
            "response_time": 12,
            "last_incident": "2023-12-28T09:15:00Z",
            "environment": "Production",
        },
        {
            "id": "SVC-005",
            "name": "Cache Layer",
            "status": "warning",
            "uptime": 99.1,
            "response_time": 8,
            "last_incident": iso_from_ms(now - 6 * HOUR_MS),
            "environment": "Production",
        },
    ]


def seed_identity_users(now: int) -> list[dict]:
    return [
        {
            "id": "USR-001",
            "name": "Sarah Johnson",
            "email": "sarah.johnson@organizeit.com",
            "role": "System Administrator",
            "department": "IT Operations",
            "status": "Active",
            "last_login": iso_from_ms(now - 2 * HOUR_MS),
            "created_at": "2024-01-15T10:00:00Z",
            "permissions": ["admin", "read", "write", "delete"],
            "mfa_enabled": True,
        },
        {
            "id": "USR-002",
            "name": "Mike Chen",
            "email": "mike.chen@organizeit.com",
            "role": "DevOps Engineer",
            "department": "Engineering",
            "status": "Active",
            "last_login": iso_from_ms(now - 4 * HOUR_MS),
            "created_at": "2024-01-20T14:30:00Z",
            "permissions": ["read", "write", "deploy"],
            "mfa_enabled": True,
        },
        {
            "id": "USR-003",
            "name": "David Kim",
            "email": "david.kim@organizeit.com",
            "role": "Data Engineer",
            "department": "Analytics",
            "status": "Active",
            "last_login": iso_from_ms(now - 24 * HOUR_MS),
            "created_at": "2024-02-01T09:15:00Z",
            "permissions": ["read", "write", "analytics"],
            "mfa_enabled": False,
        },
    ]


def seed_audit_events(now: int) -> list[dict]:
    return [
        {
            "id": "AUD-001",
            "event_type": "user_login",
            "user_id": "USR-001",
            "user_email": "sarah.johnson@organizeit.com",
            "action": "successful_login",
            "resource": "authentication_system",
            "ip_address": "192.168.1.100",
            "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
            "timestamp": iso_from_ms(now - 30 * MINUTE_MS),
            "status": "success",
        },
        {
            "id": "AUD-002",
            "event_type": "configuration_change",
            "user_id": "USR-002",
            "user_email": "mike.chen@organizeit.com",
            "action": "updated_security_policy",
            "resource": "firewall_rules",
            "details": "Modified port 443 access rules",
            "ip_address": "192.168.1.105",
            "timestamp": iso_from_ms(now - 2 * HOUR_MS),
            "status": "success",
        },
        {
            "id": "AUD-003",
            "event_type": "resource_access",
            "user_id": "USR-003",
            "user_email": "david.kim@organizeit.com",
            "action": "accessed_sensitive_data",
            "resource": "customer_database",
            "details": "Exported customer analytics report",
            "ip_address": "192.168.1.110",
            "timestamp": iso_from_ms(now - 4 * HOUR_MS),
            "status": "success",
        },
        {
            "id": "AUD-004",
            "event_type": "failed_access",
            "user_id": None,
            "user_email": "unknown@external.com",
            "action": "failed_login_attempt",
            "resource": "authentication_system",
            "details": "Multiple failed password attempts",
            "ip_address": "203.0.113.45",
            "timestamp": iso_from_ms(now - 6 * HOUR_MS),
            "status": "blocked",
        },
    ]
