from insurance_api.services.policies.policy_service import IssuanceResult, PolicyService

__all__ = ["IssuanceResult", "PolicyService"]
