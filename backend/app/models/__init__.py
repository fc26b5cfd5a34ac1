# Import all models here
from app.models.user import User
from app.models.user_plan import UserPlan
from app.models.subscription import Subscription
from app.models.notification import Notification
from app.models.notification_preferences import NotificationPreferences
from app.models.paddle_subscription import PaddleSubscription
from app.models.email_log import EmailLog
