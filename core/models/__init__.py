from .profile import Role, UserProfile
from .number_series import NumberSeries
from .audit_log import AuditLog

# Settings subsystem
from .company_setting import CompanySetting
from .tax_setting import TaxSetting
