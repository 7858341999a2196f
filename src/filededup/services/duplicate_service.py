from typing import List, Tuple
from filededup.core.models import DuplicateGroup


class DuplicateService:
    @staticmethod
    def remove_files_from_groups(groups: List[DuplicateGroup], file_paths: List[str]) -> List[DuplicateGroup]:
        """
        Removes files with the specified paths from all duplicate groups.

        Groups that contain fewer than 2 files after removal are discarded.

        Args:
            groups (list[DuplicateGroup]): List of duplicate groups to update.
            file_paths (list[str]): List of file paths to remove.

        Returns:
            list[DuplicateGroup]: Updated list of duplicate groups.
        """
        removed = set(file_paths)
        updated_groups = []
        for group in groups:
            filtered_files = [f for f in group.files if f.path not in removed]
            if len(filtered_files) >= 2:
                updated_groups.append(DuplicateGroup(fingerprint=group.fingerprint, files=filtered_files))
        return updated_groups

    @staticmethod
    def keep_only_one_file_per_group(groups: List[DuplicateGroup]) -> Tuple[List[str], List[DuplicateGroup]]:
        """
        Keeps the first file of each group and marks the rest for deletion.
        Returns:
            - List of file paths to be deleted
            - Updated list of duplicate groups
        """
        files_to_delete = []

        for group in groups:
            for file in group.files[1:]:
                files_to_delete.append(file.path)

        updated_groups = DuplicateService.remove_files_from_groups(groups, files_to_delete)

        return files_to_delete, updated_groups

    @staticmethod
    def calculate_space_savings(groups: List[DuplicateGroup], files_to_delete: List[str]) -> int:
        """Calculate total space that would be freed by deleting files."""
        delete_set = set(files_to_delete)
        return sum(
            file.size
            for group in groups
            for file in group.files
            if file.path in delete_set
        )
