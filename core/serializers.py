from rest_framework import serializers


class DynamicFieldsModelSerializer(serializers.ModelSerializer):
    """
    ModelSerializer that takes an extra `fields` argument restricting which
    fields are rendered (field projection for the listing endpoints).

    Unknown names are ignored and "id" is always kept so clients can still
    address the record.
    """

    def __init__(self, *args, **kwargs):
        fields = kwargs.pop("fields", None)
        super().__init__(*args, **kwargs)

        if fields:
            allowed = set(fields) | {"id"}
            for field_name in set(self.fields) - allowed:
                self.fields.pop(field_name)
