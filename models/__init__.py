from models.catalog import Catalog, HalfKey, Lot, Spot
from models.claim import ClaimInput, ClaimRecord, ClaimStatus, Identity, Shared, Solo
from models.occupancy import ConsistencyIssue, HalfOccupancy, HalfStatus, Occupancy
from models.results import AllocationResult, DecisionResult
from models.audit import AuditEntry
