"""
Gift catalog views shared by the member and admin APIs.
"""
from portal import storage
from .quota import quota_usage


def catalog_entry(gift, images=None, now=None) -> dict:
    """Gift fields plus this month's usage, remaining quota and gallery images."""
    usage = quota_usage(gift, now)
    data = gift.to_dict()
    data['used_this_month'] = usage.used_this_month
    data['remaining_quota'] = usage.remaining_quota
    if images is None:
        images = storage.get_gift_images_grouped().get(gift.id, [])
    data['images'] = [image.to_dict() for image in images]
    return data


def gift_catalog(now=None) -> list:
    """Every gift in id order, each with quota usage and its images."""
    images_by_gift = storage.get_gift_images_grouped()
    return [
        catalog_entry(gift, images_by_gift.get(gift.id, []), now)
        for gift in storage.get_all_gifts()
    ]
