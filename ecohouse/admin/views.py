from sqladmin import ModelView

from ecohouse.house.models import House, HouseMember
from ecohouse.profile.models import UserProfile


class HouseAdmin(ModelView, model=House):
    name = "House"
    name_plural = "Houses"
    icon = "fa-solid fa-house"

    column_list = [
        House.house_code,
        House.house_name,
        House.head_of_household_id,
        House.address,
        House.id,
        House.created_at,
        House.updated_at,
    ]
    column_searchable_list = [
        House.house_code,
        House.house_name,
        House.head_of_household_id,
    ]
    column_sortable_list = [House.house_code, House.created_at, House.updated_at]
    column_default_sort = [(House.created_at, True)]


class HouseMemberAdmin(ModelView, model=HouseMember):
    name = "House member"
    name_plural = "House members"
    icon = "fa-solid fa-people-roof"

    column_list = [
        HouseMember.user_id,
        HouseMember.house_id,
        HouseMember.is_head,
        HouseMember.joined_at,
    ]
    column_searchable_list = [HouseMember.user_id]
    column_sortable_list = [HouseMember.is_head, HouseMember.joined_at]


class UserProfileAdmin(ModelView, model=UserProfile):
    name = "Profile"
    name_plural = "Profiles"
    icon = "fa-solid fa-id-card"

    column_list = [
        UserProfile.email,
        UserProfile.full_name,
        UserProfile.user_id,
        UserProfile.house_id,
        UserProfile.is_head_of_household,
        UserProfile.verification_status,
        UserProfile.created_at,
        UserProfile.updated_at,
    ]
    column_searchable_list = [
        UserProfile.email,
        UserProfile.full_name,
        UserProfile.user_id,
    ]
    column_sortable_list = [getattr(UserProfile, field) for field in UserProfile.model_fields]


ADMIN_VIEWS = (HouseAdmin, HouseMemberAdmin, UserProfileAdmin)
